from typing import Optional, Sequence


class GreenbookImportError(Exception):
    """Base class for import failures."""
    pass


class MissingSourceFile(GreenbookImportError):
    """Raised when a required blob is absent from the container"""

    def __init__(self, file_name: str, container_name: str):
        self.file_name = file_name
        self.container_name = container_name
        super().__init__(
            f"Required file {file_name} not found in container {container_name}"
        )


class HeaderValidationError(GreenbookImportError):
    """Raised when a source file's header does not match the expected columns"""
    pass


class HeaderColumnCountMismatch(HeaderValidationError):
    def __init__(self, path, expected: Sequence[str], actual: Sequence[str]):
        self.path = path
        self.expected = list(expected)
        self.actual = list(actual)
        super().__init__(
            f"Invalid header column count in {path}: "
            f"expected {len(self.expected)}, found {len(self.actual)}"
        )


class HeaderNameMismatch(HeaderValidationError):
    def __init__(self, path, position: int, expected: str, actual: str):
        self.path = path
        self.position = position
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Invalid header in {path}. Expected '{expected}', found '{actual}'"
        )


class ParseError(GreenbookImportError):
    """Raised when a data row cannot be parsed"""

    def __init__(self, path, message: str, line: Optional[int] = None):
        self.path = path
        self.line = line
        location = f"{path}, line {line}" if line is not None else str(path)
        super().__init__(f"Malformed row in {location}: {message}")


class WriteFailure(GreenbookImportError):
    """Raised when a chunk upsert fails and its transaction is rolled back"""

    def __init__(self, table_name: str, cause: Exception):
        self.table_name = table_name
        super().__init__(f"Failed to write chunk to {table_name}: {cause}")


class MissingTargetTable(GreenbookImportError):
    """Raised when target tables are absent from the database"""

    def __init__(self, tables: Sequence[str]):
        self.tables = sorted(tables)
        super().__init__(f"Missing tables in database: {', '.join(self.tables)}")


class InvalidTransition(GreenbookImportError):
    pass
