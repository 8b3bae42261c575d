class EcsGatewayException(Exception):
    def __init__(self, operation: str, message: str):
        super().__init__(f'{operation} failed: {message}')
        self.operation = operation
