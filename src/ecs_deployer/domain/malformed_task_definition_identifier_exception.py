class MalformedTaskDefinitionIdentifierException(Exception):
    def __init__(self, identifier: str, problem: str):
        super().__init__(f'Malformed task definition identifier "{identifier}": {problem}')
        self.identifier = identifier
