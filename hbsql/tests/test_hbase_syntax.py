from ..query_parser import parse_statement
from ..ast import *
from ..commands import *
from ..field import FieldType, DataType
from ..utils.exceptions import *

def test_drop():
  assert parse_statement('DROP TABLE t') == DropTableCommand('t')
  assert parse_statement('drop table people;') == DropTableCommand('people')
  assert parse_statement('DROP TABLE `my table`').table_name == 'my table'
  try:
    parse_statement('DROP t')
    assert False
  except Exception as e:
    assert isinstance(e, SQLSyntaxError) and not isinstance(e, SyntaxNoMatch)

def test_alter_drop():
  command = parse_statement('ALTER TABLE t DROP c')
  assert command == AlterDropColumnCommand('t', 'c')
  assert command != DropTableCommand('t')
  assert parse_statement('alter table t drop c;') == command

def test_alter_add():
  command = parse_statement('ALTER TABLE t ADD c INT MAPPED BY (c = "fam.qual")')
  assert command == AlterAddColumnCommand('t', 'c', DataType(FieldType.INT), 'fam', 'qual')
  assert command.getCommandName() == 'AlterAddColumn'

  # the other mapped columns are ignored
  command = parse_statement("""
    alter table t add price decimal(8,2)
    mapped by (id = "k.id", price = "cf.price", name = "cf.name");
  """)
  assert command == AlterAddColumnCommand('t', 'price', DataType.decimal(8, 2), 'cf', 'price')

  # the last mapping of a column wins
  command = parse_statement('ALTER TABLE t ADD c STRING MAPPED BY (c = "f1.q1", c = "f2.q2")')
  assert (command.family, command.qualifier) == ('f2', 'q2')

def test_alter_add_missing_mapping():
  try:
    parse_statement('ALTER TABLE t ADD c INT MAPPED BY (other = "fam.qual")')
    assert False
  except Exception as e:
    assert isinstance(e, MissingMappingForColumn)
  try:
    parse_statement('ALTER TABLE t ADD c INT MAPPED BY ()')
    assert False
  except Exception as e:
    assert isinstance(e, MissingMappingForColumn)

def test_alter_add_malformed_mapping():
  for mapping in ('c = "famqual"', 'c = "a.b.c"', 'c = ".q"', 'c = 1', 'c > "f.q"', '"f.q" = c'):
    try:
      parse_statement('ALTER TABLE t ADD c INT MAPPED BY ({})'.format(mapping))
      assert False
    except Exception as e:
      assert isinstance(e, MalformedMappingSyntax)

def test_alter_add_unknown_type():
  try:
    parse_statement('ALTER TABLE t ADD c FOO MAPPED BY (c = "f.q")')
    assert False
  except Exception as e:
    assert isinstance(e, NoMatchingType)

def test_alter_without_add_or_drop():
  try:
    parse_statement('ALTER TABLE t RENAME c')
    assert False
  except Exception as e:
    assert isinstance(e, SQLSyntaxError) and not isinstance(e, SyntaxNoMatch)

def test_insert_values():
  command = parse_statement('INSERT INTO TABLE t VALUES (1, "x", null)')
  assert command == InsertValuesCommand('t', ['1', 'x', None])
  assert command.values == ('1', 'x', None)
  # an explicit null differs from the text "null"
  command = parse_statement("INSERT INTO TABLE t VALUES ('null', null, -2, 1.5, true);")
  assert command.values == ('null', None, '-2', '1.5', 'true')
  assert parse_statement('INSERT INTO TABLE t VALUES ()').values == ()

  try:
    parse_statement('INSERT INTO TABLE t VALUES (1, a)')
    assert False
  except Exception as e:
    assert isinstance(e, SQLSyntaxError)

def test_update():
  command = parse_statement('UPDATE t SET a = 1, b = "x" WHERE k = 3')
  assert command == UpdateTableCommand(
    't', ['a', 'b'], ['1', 'x'],
    SelectionOp(LoadOp('t'), EqOp(Var('k'), NumberConst(3)))
  )
  assert command.columns == ('a', 'b')

  command = parse_statement('update ns.t as x set a = null where x.k = 1 and x.v > 2;')
  assert command.table_name == 'ns.t'
  assert command.values == (None,)
  assert command.filter == SelectionOp(
    AliasOp('x', LoadOp('ns.t')),
    And(EqOp(Var('x.k'), NumberConst(1)), GtOp(Var('x.v'), NumberConst(2)))
  )

  for sql in (
    'UPDATE t SET a = 1',
    'UPDATE t SET WHERE k = 1',
    'UPDATE t SET a = b WHERE k = 1',
    'UPDATE (SELECT a FROM t) SET a = 1 WHERE k = 1',
  ):
    try:
      parse_statement(sql)
      assert False
    except Exception as e:
      assert isinstance(e, SQLSyntaxError) and not isinstance(e, SyntaxNoMatch)

def test_delete():
  command = parse_statement('DELETE FROM t WHERE k = 1')
  assert command == DeleteFromTableCommand('t', SelectionOp(LoadOp('t'), EqOp(Var('k'), NumberConst(1))))
  command = parse_statement("delete from t where name like 'a%' or k in (1, 2);")
  assert isinstance(command.filter.bool_op, Or)
  assert isinstance(command.filter.bool_op.rhs, InOp)
  try:
    parse_statement('DELETE FROM t')
    assert False
  except Exception as e:
    assert isinstance(e, SQLSyntaxError) and not isinstance(e, SyntaxNoMatch)

def test_load():
  command = parse_statement('LOAD DATA LOCAL INPATH "/p" INTO TABLE t FIELDS TERMINATED BY ","')
  assert command == BulkLoadCommand('/p', 't', True, ',', False)
  command = parse_statement('LOAD PARALL DATA INPATH "/p" INTO TABLE t')
  assert command == BulkLoadCommand('/p', 't', False, None, True)
  assert command.options == LoadOptions(is_parallel=True)
  command = parse_statement("load parall data local inpath '/data/t.csv' into table t fields terminated by '|';")
  assert command == BulkLoadCommand.fromOptions('/data/t.csv', 't', LoadOptions(True, '|', True))

  for sql in (
    'LOAD DATA LOCAL PARALL INPATH "/p" INTO TABLE t',
    'LOAD DATA INPATH /p INTO TABLE t',
    'LOAD DATA INPATH "/p" INTO TABLE t FIELDS BY ","',
  ):
    try:
      parse_statement(sql)
      assert False
    except Exception as e:
      assert isinstance(e, SQLSyntaxError)

def test_base_statements():
  ast = parse_statement('SELECT a FROM t WHERE a > 1')
  assert ast == ProjectionOp(SelectionOp(LoadOp('t'), GtOp(Var('a'), NumberConst(1))), Var('a'))
  ast = parse_statement('INSERT INTO TABLE t SELECT * FROM s')
  assert ast == InsertIntoOp('t', LoadOp('s'), False)
  ast = parse_statement('INSERT OVERWRITE TABLE t SELECT * FROM s;')
  assert ast.overwrite
  ast = parse_statement('WITH x AS (SELECT * FROM s) SELECT * FROM x')
  assert ast == WithOp(LoadOp('x'), ('x', LoadOp('s')))

def test_no_match():
  for sql in ('', ';', 'FOO bar', 'CREATE TABLE t', 'INSERT INTO TABLE t VALUE (1)'):
    try:
      parse_statement(sql)
      assert False
    except Exception as e:
      assert isinstance(e, SyntaxNoMatch)

def test_incomplete_statement():
  for sql in ('DROP TABLE t u', 'DROP TABLE t;;', 'ALTER TABLE t DROP c, d'):
    try:
      parse_statement(sql)
      assert False
    except Exception as e:
      assert isinstance(e, SQLSyntaxError)
      assert e.near
