class JuicyURLsError(Exception):
    pass

class ConfigError(JuicyURLsError):
    pass

class InvalidCategoryError(ConfigError):
    """Unknown category name in configuration or CLI flags."""
    pass

class InputError(JuicyURLsError):
    """Input file is missing, unreadable or malformed. Fatal before any work."""
    pass

class InputTooLargeError(InputError):
    pass

class PipelineError(JuicyURLsError):
    pass

class OutputError(JuicyURLsError):
    """Results could not be written to the output sink."""
    pass
