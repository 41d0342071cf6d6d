class ConversionError(Exception):
    pass


class ConfigurationError(ConversionError, ValueError):
    pass
