__version__ = "1.0"

from .keywords import Keyword, KeywordTable
from .field import Field, FieldType, DataType, MappingEntry
from .commands import (
  Command,
  DropTableCommand,
  AlterDropColumnCommand,
  AlterAddColumnCommand,
  InsertValuesCommand,
  UpdateTableCommand,
  DeleteFromTableCommand,
  BulkLoadCommand,
  LoadOptions,
)
from .query_parser import HBaseSQLParser, parse_statement, parse_data_type, getKeywords
from .utils.exceptions import (
  SQLSyntaxError,
  SyntaxNoMatch,
  NoMatchingType,
  MalformedMappingSyntax,
  MissingMappingForColumn,
)
