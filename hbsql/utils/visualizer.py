import queue
import os
import graphviz
from hbsql.ast import *
from hbsql.commands import Command
from . import *

class CommandViz:
    """
    Visulizer for the given command and, for UPDATE and DELETE, its filter plan
    """
    dataset_node_shape, op_node_shape, command_node_shape = 'box', 'oval', 'box3d'

    @classmethod
    def getVizNodeTitle(cls, node) -> str:
        if isinstance(node, Command):
            fields = ', '.join(
                "{}={}".format(name, value) for name, value in zip(node._fields, node)
                if name != 'filter'
            )
            return node.getCommandName() + '\\n' + fields
        if isinstance(node, LoadOp):
            return str(node)
        if isinstance(node, SuperRelationalOp):
            return node.getOpName() + '\\n' + str(node).split(' : ', 1)[-1]
        if isinstance(node, (Const, Var)):
            return str(node)
        return getClassNameOfInstance(node) + '\\n' + str(node)

    @classmethod
    def getVizNodeShape(cls, node) -> str:
        if isinstance(node, Command):
            return cls.command_node_shape
        if isinstance(node, LoadOp):
            return cls.dataset_node_shape
        return cls.op_node_shape

    @classmethod
    def getVizChildren(cls, node) -> list:
        if isinstance(node, Command):
            return [node.filter] if hasattr(node, 'filter') else []
        if isinstance(node, SelectionOp):
            # the predicate is drawn under the selection, next to its relation
            return [node.relation, node.bool_op]
        if isinstance(node, (Tuple, Function)):
            return list(node.exprs if isinstance(node, Tuple) else node.args)
        return getChildren(node)

    @classmethod
    def build(cls, command: Command, img_name: str = "Command") -> graphviz.Graph:
        """Returns the graph of the command, with one viz node for each command or AST node"""
        ERROR_IF_NOT_INSTANCE_OF(command, Command,
            "CommandViz only visualizes commands ({} received)".format(type(command))
        )
        graph = graphviz.Graph(img_name, comment='The command and its filter plan', format='svg')
        # BFS to traverse the command and its filter plan
        q = queue.Queue() # q stores triples (node, its viz node id, its parent viz node id)
        next_viz_node_id = 0
        q.put((command, next_viz_node_id, -1))
        next_viz_node_id += 1 # the next id to be assigned
        while not q.empty():
            cur_node, cur_viz_node_id, parent_viz_node_id = q.get()
            graph.node(
                name = str(cur_viz_node_id),
                label = cls.getVizNodeTitle(cur_node),
                shape = cls.getVizNodeShape(cur_node)
            )
            # connect the current viz node with its parent
            if parent_viz_node_id >= 0:
                graph.edge(str(parent_viz_node_id), str(cur_viz_node_id))
            for child_node in cls.getVizChildren(cur_node):
                if child_node is None:
                    continue
                q.put((child_node, next_viz_node_id, cur_viz_node_id))
                next_viz_node_id += 1
        return graph

    @classmethod
    def show(cls, command: Command, img_save_dir: str = os.path.dirname(__file__),
            img_name: str = "Command", view: bool = False) -> str:
        """Renders the graph into 'img_save_dir' and returns the path of the rendered file"""
        return cls.build(command, img_name).render(directory=img_save_dir, view=view)
