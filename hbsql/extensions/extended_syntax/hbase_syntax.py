from collections import OrderedDict
from typing import List
import typing

from ...ast import *
from ...field import FieldType, DataType, Field, MappingEntry
from ...keywords import Keyword, KeywordTable
from ...commands import *
from ...utils import *
from ... import query_parser_toolbox as toolbox
from ...query_parser_toolbox import TokenList, peek, expect, accept, repsep
from .extended_syntax import ExtendedSyntax

# names of the primitive types, in the order they are tried
#   (the first matching entry wins, and decimal with '(p, s)' is tried before plain decimal)
PRIMITIVE_TYPE_NAMES: typing.List[typing.Tuple[typing.Tuple[str, ...], FieldType]] = [
  (('string',), FieldType.STRING),
  (('float',), FieldType.FLOAT),
  (('int', 'integer'), FieldType.INT),
  (('tinyint',), FieldType.TINYINT),
  (('short', 'smallint'), FieldType.SMALLINT),
  (('double',), FieldType.DOUBLE),
  (('long', 'bigint'), FieldType.BIGINT),
  (('binary',), FieldType.BINARY),
  (('bool', 'boolean'), FieldType.BOOLEAN),
  (('decimal',), FieldType.DECIMAL),
  (('date',), FieldType.DATE),
  (('timestamp',), FieldType.TIMESTAMP),
  (('varchar',), FieldType.VARCHAR),
  (('byte',), FieldType.BYTE),
]

class HBaseSyntax(ExtendedSyntax):
  """
  The DDL/DML statements over HBase tables, where each logical column
    is stored under a column family and a qualifier.

  Example #1:
    ALTER TABLE t ADD c INT MAPPED BY (c = "fam.qual")
  Example #2:
    LOAD PARALL DATA LOCAL INPATH "/data/t.csv" INTO TABLE t FIELDS TERMINATED BY ","
  Example #3:
    UPDATE t SET c1 = 1, c2 = "x" WHERE k = 3
  """
  DEFAULT_DECIMAL_PRECISION = 10
  DEFAULT_DECIMAL_SCALE = 0

  _extended_symbols_: str = ';='
  _extended_keywords_: KeywordTable = KeywordTable([
    Keyword.of('add'),
    Keyword.of('alter'),
    Keyword.of('cols'),
    Keyword.of('data'),
    Keyword.of('drop'),
    Keyword.of('exists'),
    Keyword.of('fields'),
    Keyword.of('inpath'),
    Keyword.of('key'),
    Keyword.of('load'),
    Keyword.of('local'),
    Keyword.of('mapped'),
    Keyword.of('primary'),
    Keyword.of('parall'),
    Keyword.of('tables'),
    Keyword.of('values'),
    Keyword.of('terminated'),
    Keyword.of('update'),
    Keyword.of('delete'),
    Keyword.of('set'),
    Keyword.of('=', 'EQ'),
  ])

  ######## types ###########################

  @classmethod
  def primitive_type_exp(cls, tokens: TokenList) -> DataType:
    """
    Parses a primitive type name (in any case) into its DataType.
    Raises NoMatchingType if the tokens do not start with a known type.
    """
    token = peek(tokens)
    if token is None:
      raise NoMatchingType("expected a data type but the statement ended")
    name = token.lower()
    for names, field_type in PRIMITIVE_TYPE_NAMES:
      if name not in names:
        continue
      if field_type == FieldType.DECIMAL:
        return cls.decimal_type_exp(tokens)
      if field_type == FieldType.VARCHAR:
        if peek(tokens, 1) != '(':
          # varchar only exists with a length
          break
        tokens.pop(0)
        expect(tokens, '(')
        length = cls.integer_exp(tokens)
        expect(tokens, ')')
        try:
          return DataType.varchar(length)
        except ValueError as e:
          raise SQLSyntaxError(str(e))
      tokens.pop(0)
      return DataType(field_type)
    raise NoMatchingType("no matching data type for '{}'".format(token), near=tokens[:5])

  @classmethod
  def decimal_type_exp(cls, tokens: TokenList) -> DataType:
    """DECIMAL(precision, scale), or DECIMAL with the default precision and scale"""
    tokens.pop(0)
    if accept(tokens, '('):
      precision = cls.integer_exp(tokens)
      expect(tokens, ',')
      scale = cls.integer_exp(tokens)
      expect(tokens, ')')
      try:
        return DataType.decimal(precision, scale)
      except ValueError as e:
        raise SQLSyntaxError(str(e))
    return DataType.decimal(cls.DEFAULT_DECIMAL_PRECISION, cls.DEFAULT_DECIMAL_SCALE)

  @staticmethod
  def integer_exp(tokens: TokenList) -> int:
    token = peek(tokens)
    if token is None or not token.isdigit():
      raise SQLSyntaxError("expected an integer", near=tokens[:5])
    return int(tokens.pop(0))

  ######## sub-grammars ####################

  def table_col_exp(self, tokens: TokenList) -> Field:
    """<ident> <type>"""
    name = toolbox.ident_exp(tokens)
    return Field(name, self.primitive_type_exp(tokens))

  def table_cols_exp(self, tokens: TokenList) -> List[Field]:
    return repsep(tokens, self.table_col_exp)

  def keys_exp(self, tokens: TokenList) -> List[str]:
    return repsep(tokens, toolbox.ident_exp)

  def name_space_exp(self, tokens: TokenList) -> str:
    """<ident> ."""
    name = toolbox.ident_exp(tokens)
    expect(tokens, '.')
    return name

  def values_exp(self, tokens: TokenList) -> List[Const]:
    return repsep(tokens, toolbox.literal_exp, closing=')')

  def expressions_exp(self, tokens: TokenList) -> List[Expr]:
    return repsep(tokens, toolbox.or_exp, closing=')')

  ######## mapping #########################

  @classmethod
  def extractMappingInfo(cls, equations: List[Expr]) -> 'OrderedDict[str, MappingEntry]':
    """
    Parameters
    -----------
    equations: the expressions of 'MAPPED BY (...)'

    Return
    -----------
    The mapping from each column to its family and qualifier, in the order of the equations.
    Each equation must be 'column = "family.qualifier"';
      when a column is mapped several times, its last equation is kept.
    """
    mapping = OrderedDict()
    for equation in equations:
      if not (
        isinstance(equation, EqOp)
        and isinstance(equation.lhs, Var)
        and isinstance(equation.rhs, StringConst)
      ):
        raise MalformedMappingSyntax(
          "a column mapping must look like column = \"family.qualifier\" ('{}' received)".format(equation)
        )
      parts = equation.rhs.const.split('.')
      if len(parts) != 2 or not all(parts):
        raise MalformedMappingSyntax(
          "'{}' is not in the form of \"family.qualifier\"".format(equation.rhs.const)
        )
      column = equation.lhs.path
      # re-inserting moves a repeated column to its last position
      mapping.pop(column, None)
      mapping[column] = MappingEntry(column, parts[0], parts[1])
    return mapping

  @classmethod
  def resolveMapping(cls, field: Field, equations: List[Expr]) -> MappingEntry:
    mapping = cls.extractMappingInfo(equations)
    if field.name not in mapping:
      raise MissingMappingForColumn(
        "column '{}' is not mapped to any family and qualifier (mapped: {})".format(
          field.name, ', '.join(mapping) or 'none'
        )
      )
    return mapping[field.name]

  ######## statements ######################

  def table_name_of(self, relation: Expr) -> str:
    """The name of the table behind the (possibly aliased) relation of UPDATE/DELETE"""
    if isinstance(relation, AliasOp):
      relation = relation.relation
    if not isinstance(relation, LoadOp):
      raise SQLSyntaxError("expected a table, not {}".format(getClassNameOfInstance(relation)))
    return relation.name

  def trigger_drop(self, tokens: TokenList) -> bool:
    return peek(tokens) == 'drop'

  def parse_drop(self, tokens: TokenList) -> DropTableCommand:
    expect(tokens, 'drop', 'table')
    return DropTableCommand(toolbox.ident_exp(tokens))

  def trigger_alter_drop(self, tokens: TokenList) -> bool:
    return peek(tokens) == 'alter' and peek(tokens, 3) == 'drop'

  def parse_alter_drop(self, tokens: TokenList) -> AlterDropColumnCommand:
    expect(tokens, 'alter', 'table')
    table_name = toolbox.ident_exp(tokens)
    expect(tokens, 'drop')
    return AlterDropColumnCommand(table_name, toolbox.ident_exp(tokens))

  def trigger_alter_add(self, tokens: TokenList) -> bool:
    return peek(tokens) == 'alter' and peek(tokens, 3) != 'drop'

  def parse_alter_add(self, tokens: TokenList) -> AlterAddColumnCommand:
    expect(tokens, 'alter', 'table')
    table_name = toolbox.ident_exp(tokens)
    expect(tokens, 'add')
    field = self.table_col_exp(tokens)
    expect(tokens, 'mapped', 'by', '(')
    equations = self.expressions_exp(tokens)
    expect(tokens, ')')
    entry = self.resolveMapping(field, equations)
    return AlterAddColumnCommand(table_name, field.name, field.type, entry.family, entry.qualifier)

  def trigger_insert_values(self, tokens: TokenList) -> bool:
    return peek(tokens) == 'insert' and peek(tokens, 4) == 'values'

  def parse_insert_values(self, tokens: TokenList) -> InsertValuesCommand:
    expect(tokens, 'insert', 'into', 'table')
    table_name = toolbox.ident_exp(tokens)
    expect(tokens, 'values', '(')
    values = self.values_exp(tokens)
    expect(tokens, ')')
    return InsertValuesCommand(table_name, [value.toText() for value in values])

  def update_column_exp(self, tokens: TokenList) -> typing.Tuple[str, str]:
    """<ident> = <literal>"""
    column = toolbox.ident_exp(tokens)
    expect(tokens, '=')
    return column, toolbox.literal_exp(tokens).toText()

  def trigger_update(self, tokens: TokenList) -> bool:
    return peek(tokens) == 'update'

  def parse_update(self, tokens: TokenList) -> UpdateTableCommand:
    expect(tokens, 'update')
    relation = toolbox.single_source(tokens)
    expect(tokens, 'set')
    assignments = repsep(tokens, self.update_column_exp)
    expect(tokens, 'where')
    predicate = toolbox.or_exp(tokens)
    columns = [column for column, _ in assignments]
    values = [value for _, value in assignments]
    return UpdateTableCommand(
      self.table_name_of(relation), columns, values, SelectionOp(relation, predicate)
    )

  def trigger_delete(self, tokens: TokenList) -> bool:
    return peek(tokens) == 'delete'

  def parse_delete(self, tokens: TokenList) -> DeleteFromTableCommand:
    expect(tokens, 'delete', 'from')
    relation = toolbox.single_source(tokens)
    expect(tokens, 'where')
    predicate = toolbox.or_exp(tokens)
    return DeleteFromTableCommand(self.table_name_of(relation), SelectionOp(relation, predicate))

  def trigger_load(self, tokens: TokenList) -> bool:
    return peek(tokens) == 'load'

  def parse_load(self, tokens: TokenList) -> BulkLoadCommand:
    expect(tokens, 'load')
    is_parallel = accept(tokens, 'parall')
    expect(tokens, 'data')
    is_local = accept(tokens, 'local')
    expect(tokens, 'inpath')
    input_path = toolbox.string_lit_exp(tokens)
    expect(tokens, 'into', 'table')
    table_name = toolbox.ident_exp(tokens)
    delimiter = None
    if accept(tokens, 'fields'):
      expect(tokens, 'terminated', 'by')
      delimiter = toolbox.string_lit_exp(tokens)
    options = LoadOptions(is_local=is_local, delimiter=delimiter, is_parallel=is_parallel)
    return BulkLoadCommand.fromOptions(input_path, table_name, options)
