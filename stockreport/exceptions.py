class AppError(Exception):
    def __init__(self, message: str, code: str = "INTERNAL_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    def __init__(self, message: str, code: str = "VALIDATION_ERROR"):
        super().__init__(message, code=code)


class InvalidSymbolError(ValidationError):
    def __init__(self, symbols: list[str]):
        self.symbols = symbols
        if len(symbols) == 1:
            message = f"Invalid stock symbol format: {symbols[0]}"
        else:
            message = f"Invalid symbols: {', '.join(symbols)}"
        super().__init__(message, code="INVALID_SYMBOL")


class DuplicateSymbolError(ValidationError):
    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(f"Stock {symbol} already exists", code="DUPLICATE_SYMBOL")


class SymbolNotFoundError(ValidationError):
    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(f"Stock {symbol} not found", code="NOT_FOUND")


class BackendUnavailableError(AppError):
    def __init__(self, message: str):
        super().__init__(message, code="BACKEND_UNAVAILABLE")


class ServiceUnavailableError(AppError):
    def __init__(self, message: str):
        super().__init__(message, code="SERVICE_UNAVAILABLE")


class ProviderError(AppError):
    def __init__(self, symbol: str, message: str):
        self.symbol = symbol
        super().__init__(message, code="PROVIDER_ERROR")


class DeliveryError(AppError):
    def __init__(self, message: str):
        super().__init__(message, code="DELIVERY_FAILED")


class ConfigurationError(AppError):
    def __init__(self, message: str):
        super().__init__(message, code="CONFIGURATION_ERROR")
