from hbsql.query_parser import parse_statement, getKeywords
from hbsql.utils.visualizer import CommandViz


statements = [
  'DROP TABLE people',
  'ALTER TABLE people DROP nickname',
  'ALTER TABLE people ADD age INT MAPPED BY (age = "info.age")',
  'ALTER TABLE people ADD salary DECIMAL(12,2) MAPPED BY (salary = "pay.salary")',
  'INSERT INTO TABLE people VALUES (1, "alice", null)',
  'UPDATE people SET name = "bob", age = 31 WHERE id = 1',
  'DELETE FROM people WHERE age < 18 AND name LIKE "a%"',
  'LOAD PARALL DATA LOCAL INPATH "/tmp/people.csv" INTO TABLE people FIELDS TERMINATED BY ","',
  'SELECT name, age FROM people WHERE age > 30;',
]

print("Keywords:\n----------------")
print(', '.join(getKeywords()))

print("Commands:\n----------------")
for sql in statements:
  command = parse_statement(sql)
  print(repr(command))
  if hasattr(command, 'toSQL'):
    # the canonical text parses back to the same command
    assert parse_statement(command.toSQL()) == command
    print("  ->", command.toSQL())

"""
  The graph of the DELETE command should look like:
          Delete
            |
        Selection
     /            \
people           And
              /        \
            Lt        Like
           /  \       /   \
         age  18   name   'a%'
"""
#CommandViz.show(parse_statement(statements[6]), view=True)
