class SQLSyntaxError(Exception):
    """Exception raised for invalid SQL syntax."""

    def __init__(self, message="Invalid SQL syntax", near=None):
        self.message = message
        # the tokens left unparsed when the error was raised, if known
        self.near = near
        if near:
            message = "{} (near '{}')".format(message, ' '.join(near))
        super().__init__(message)

class SyntaxNoMatch(SQLSyntaxError):
    """Exception raised when no statement form matches the input."""

    def __init__(self, message="No statement form matches the input", near=None):
        super().__init__(message, near)

class NoMatchingType(SQLSyntaxError):
    """Exception raised for an unrecognized primitive data type."""

    def __init__(self, message="No matching data type", near=None):
        super().__init__(message, near)

class MalformedMappingSyntax(SQLSyntaxError):
    """Exception raised when a column mapping is not written as column = "family.qualifier"."""

    def __init__(self, message="Malformed column mapping", near=None):
        super().__init__(message, near)

class MissingMappingForColumn(SQLSyntaxError):
    """Exception raised when a declared column has no family/qualifier mapping."""

    def __init__(self, message="Missing mapping for column", near=None):
        super().__init__(message, near)

class ExtensionInternalError(Exception):
    """Exception raised for internal errors in extensions (like extended statement parsers)."""

    def __init__(self, message="Extension internal error"):
        self.message = message
        super().__init__(self.message)

class RegistryError(Exception):
    """Exception raised in registry."""

    def __init__(self, message="Invalid registry"):
        self.message = message
        super().__init__(self.message)
