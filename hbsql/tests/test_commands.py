from ..query_parser import parse_statement
from ..ast import *
from ..commands import *
from ..field import FieldType, DataType

commands = [
  DropTableCommand('t'),
  DropTableCommand('key'),
  DropTableCommand('my table'),
  AlterDropColumnCommand('t', 'c'),
  AlterAddColumnCommand('t', 'c', DataType(FieldType.INT), 'fam', 'qual'),
  AlterAddColumnCommand('t', 'price', DataType.decimal(12, 2), 'cf', 'price'),
  AlterAddColumnCommand('t', 'name', DataType.varchar(32), 'cf', 'name'),
  AlterAddColumnCommand('t', 'flag', DataType(FieldType.BYTE), 'cf', 'flag'),
  AlterAddColumnCommand('t', 'small', DataType(FieldType.TINYINT), 'cf', 'small'),
  InsertValuesCommand('t', ['1', 'x', None]),
  InsertValuesCommand('t', ['null', 'say "hi"', '-2.5']),
  InsertValuesCommand('t', []),
  UpdateTableCommand(
    't', ['a', 'b'], ['1', None],
    SelectionOp(LoadOp('t'), EqOp(Var('k'), NumberConst(3)))
  ),
  UpdateTableCommand(
    'ns.t', ['values'], ['v'],
    SelectionOp(
      AliasOp('x', LoadOp('ns.t')),
      Or(LikeOp(Var('x.name'), StringConst('a%')), And(GtOp(Var('x.k'), NumberConst(1)), TrueConst()))
    )
  ),
  DeleteFromTableCommand('t', SelectionOp(LoadOp('t'), InOp(Var('k'), Tuple(NumberConst(1), NumberConst(2))))),
  DeleteFromTableCommand('t', SelectionOp(LoadOp('t'), IsOp(Var('v'), NullConst()))),
  BulkLoadCommand('/p', 't', True, ',', False),
  BulkLoadCommand('/p', 't', False, None, True),
  BulkLoadCommand('/data/t.csv', 't', True, '|', True),
  BulkLoadCommand('/p', 't', False, '"', False),
  DeleteFromTableCommand('t', SelectionOp(LoadOp('t'), EqOp(Var('key'), NumberConst(1)))),
  DeleteFromTableCommand('t', SelectionOp(LoadOp('t'), EqOp(Var('my col'), NumberConst(1)))),
  DeleteFromTableCommand('t', SelectionOp(LoadOp('t'), EqOp(Var('a'), StringConst("it's")))),
  DeleteFromTableCommand('t', SelectionOp(LoadOp('t'), EqOp(Function('upper', Var('key')), StringConst('say "hi"')))),
  UpdateTableCommand(
    't', ['values'], ['v'],
    SelectionOp(
      AliasOp('x', LoadOp('t')),
      And(EqOp(Var('x.values'), StringConst('q')), NotOp(InOp(Var('k'), Tuple(NumberConst(1), NumberConst(2)))))
    )
  ),
  AlterAddColumnCommand('t', 'c', DataType(FieldType.INT), 'f"x', 'q'),
  AlterAddColumnCommand('t', 'c', DataType(FieldType.INT), "f'x", 'q'),
]

def test_toSQL_round_trip():
  for command in commands:
    assert parse_statement(command.toSQL()) == command
    assert parse_statement(command.toSQL() + ';') == command

def test_toSQL():
  assert DropTableCommand('t').toSQL() == 'DROP TABLE t'
  assert DropTableCommand('key').toSQL() == 'DROP TABLE `key`'
  assert str(InsertValuesCommand('t', ['1', None])) == 'INSERT INTO TABLE t VALUES ("1", null)'
  assert AlterAddColumnCommand('t', 'c', DataType.decimal(10, 0), 'f', 'q').toSQL() \
    == 'ALTER TABLE t ADD c DECIMAL(10,0) MAPPED BY (c = "f.q")'
  assert BulkLoadCommand('/p', 't', True, ',', True).toSQL() \
    == 'LOAD PARALL DATA LOCAL INPATH "/p" INTO TABLE t FIELDS TERMINATED BY ","'
  assert UpdateTableCommand('t', ['a'], ['1'], SelectionOp(LoadOp('t'), EqOp(Var('k'), StringConst('x')))).toSQL() \
    == 'UPDATE t SET a = "1" WHERE k = "x"'
  assert parse_statement('DELETE FROM t WHERE `key` = 1').toSQL() == 'DELETE FROM t WHERE `key` = 1'
  assert parse_statement('DELETE FROM t WHERE `my col` = 1').toSQL() == 'DELETE FROM t WHERE `my col` = 1'
  assert parse_statement('DELETE FROM t WHERE a = "it\'s"').toSQL() == 'DELETE FROM t WHERE a = "it\'s"'
  assert parse_statement("ALTER TABLE t ADD c INT MAPPED BY (c = 'f\"x.q')").toSQL() \
    == "ALTER TABLE t ADD c INT MAPPED BY (c = 'f\"x.q')"

def test_unwritable_string():
  try:
    InsertValuesCommand('t', ['it\'s "x"']).toSQL()
    assert False
  except Exception as e:
    assert isinstance(e, ValueError)
  try:
    quoteString('\'"')
    assert False
  except Exception as e:
    assert isinstance(e, ValueError)

def test_command_equality():
  assert DropTableCommand('t') == DropTableCommand('t')
  assert DropTableCommand('t') != DropTableCommand('u')
  # commands of different kinds never equal each other
  assert DeleteFromTableCommand('t', None) != DropTableCommand('t')
  assert len({DropTableCommand('t'), DropTableCommand('t'), AlterDropColumnCommand('t', 'c')}) == 2
  assert InsertValuesCommand('t', ['1']) == InsertValuesCommand('t', ('1',))

def test_command_hashing():
  # commands with filter plans are hashed by value like the others
  assert len(set(commands)) == len(commands)
  delete = parse_statement('DELETE FROM t WHERE a = 1 AND b IN (1, 2)')
  assert hash(delete) == hash(parse_statement('DELETE FROM t WHERE a = 1 AND b IN (1, 2)'))
  assert len({delete, parse_statement('DELETE FROM t WHERE a = 1 AND b IN (1, 2)')}) == 1
  update = parse_statement('UPDATE t SET a = 1 WHERE CASE WHEN k > 1 THEN true ELSE false END')
  assert update in {update}
  assert hash(EqOp(Var('a'), NumberConst(1))) == hash(EqOp(Var('a'), NumberConst(1)))

def test_command_immutability():
  command = BulkLoadCommand('/p', 't', False, None, False)
  try:
    command.table_name = 'u'
    assert False
  except Exception as e:
    assert isinstance(e, AttributeError)
  try:
    UpdateTableCommand('t', ['a', 'b'], ['1'], None)
    assert False
  except Exception as e:
    assert isinstance(e, ValueError)

def test_LoadOptions():
  assert LoadOptions() == LoadOptions(False, None, False)
  options = LoadOptions(delimiter='\t')
  command = BulkLoadCommand.fromOptions('/p', 't', options)
  assert command.options == options
  assert command.getCommandName() == 'BulkLoad'
