import os
import sys
sys.path.append(os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from hbsql.query_parser import parse_statement, parse_data_type
from hbsql.utils.exceptions import SQLSyntaxError
from hbsql.utils.visualizer import CommandViz

alter_add_sql = """
    ALTER TABLE orders
    ADD amount DECIMAL(10,2)
    MAPPED BY (amount = "cf.amount", customer = "cf.customer")
"""
command = parse_statement(alter_add_sql)
print(command.getCommandName(), command.family, command.qualifier, command.data_type)

update_sql = """
    UPDATE orders AS o
    SET status = "shipped", amount = 12.5
    WHERE o.id IN (1, 2, 3) OR o.status = 'new'
"""
command = parse_statement(update_sql)
print(command.toSQL())
CommandViz.show(command, view=True)

print(parse_data_type("varchar(64)"))

try:
  parse_statement('ALTER TABLE orders ADD note STRING MAPPED BY (amount = "cf.amount")')
except SQLSyntaxError as e:
  print(type(e).__name__, e)
