"""
Visualizer for Expression Evaluation
Rebuilds the expression tree from a postfix trace and draws it with Plotly
"""

from typing import Dict, List, Tuple
import uuid

import plotly.graph_objects as go

from errors import MalformedExpressionError
from evaluator import ARITHMETIC, EvaluationResult, format_tokens
from tokenizer import Number, Token


class TreeNode:
    """A number leaf, or an operator applied to two subtrees"""

    def __init__(self, label: str, value: float, children: List['TreeNode'] = None):
        self.id = uuid.uuid4().hex
        self.label = label
        self.value = value
        self.children = children or []

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def __repr__(self):
        return f"TreeNode({self.label}, value={self.value})"


class ExpressionTree:
    """Binary expression tree replayed from the evaluator's postfix trace"""

    def __init__(self, root: TreeNode):
        self.root = root

    @classmethod
    def from_postfix(cls, postfix: List[Token]) -> 'ExpressionTree':
        stack: List[TreeNode] = []
        for token in postfix:
            if isinstance(token, Number):
                stack.append(TreeNode(str(token), token.value))
                continue
            if len(stack) < 2:
                raise MalformedExpressionError(
                    f"Operator '{token}' is missing an operand in postfix trace")
            right = stack.pop()
            left = stack.pop()
            value = ARITHMETIC[token.kind](left.value, right.value)
            stack.append(TreeNode(str(token), value, [left, right]))

        if len(stack) != 1:
            raise MalformedExpressionError(
                f"Postfix trace builds {len(stack)} trees instead of 1")
        return cls(stack[0])

    def nodes(self) -> List[TreeNode]:
        """All nodes, parents before children."""
        result = []
        pending = [self.root]
        while pending:
            node = pending.pop()
            result.append(node)
            pending.extend(reversed(node.children))
        return result

    def depth(self) -> int:
        """Number of levels, counting the root as 1."""
        deepest = 0
        pending = [(self.root, 1)]
        while pending:
            node, level = pending.pop()
            deepest = max(deepest, level)
            pending.extend((child, level + 1) for child in node.children)
        return deepest


class TreeVisualizer:
    """Creates interactive tree visualization"""

    def __init__(self, result: EvaluationResult, expression: str = ""):
        self.result = result
        self.expression = expression or format_tokens(result.postfix)
        self.tree = ExpressionTree.from_postfix(result.postfix)

    def _calculate_positions(self, root: TreeNode) -> Tuple[Dict, List]:
        """
        Calculate x, y positions for each node in the tree.
        Leaves take the next free x slot; a parent sits over the mean of its children.
        Walks post-order with an explicit stack, so tree depth is unbounded.

        Returns:
            Tuple of (positions dict, edges list)
        """
        pos = {}
        edges = []
        x_offset = 0

        # (node, depth, children already placed)
        pending = [(root, 0, False)]
        while pending:
            node, depth, expanded = pending.pop()

            if node.is_leaf:
                pos[node.id] = (x_offset, -depth)  # Negative so tree grows downward
                x_offset += 1
                continue

            if not expanded:
                pending.append((node, depth, True))
                for child in reversed(node.children):
                    pending.append((child, depth + 1, False))
                continue

            child_xs = [pos[child.id][0] for child in node.children]
            pos[node.id] = (sum(child_xs) / len(child_xs), -depth)
            for child in node.children:
                edges.append((node.id, child.id))

        return pos, edges

    def build_figure(self) -> go.Figure:
        positions, edges = self._calculate_positions(self.tree.root)
        all_nodes = self.tree.nodes()

        fig = go.Figure()

        # All edges in one trace, segments separated by None gaps
        edge_x, edge_y = [], []
        for from_id, to_id in edges:
            edge_x.extend([positions[from_id][0], positions[to_id][0], None])
            edge_y.extend([positions[from_id][1], positions[to_id][1], None])
        if edges:
            fig.add_trace(go.Scatter(
                x=edge_x,
                y=edge_y,
                mode='lines',
                line=dict(color='#999999', width=2),
                hoverinfo='skip',
                showlegend=False
            ))

        operator_nodes = [n for n in all_nodes if not n.is_leaf]
        number_nodes = [n for n in all_nodes if n.is_leaf]

        if operator_nodes:
            fig.add_trace(go.Scatter(
                x=[positions[n.id][0] for n in operator_nodes],
                y=[positions[n.id][1] for n in operator_nodes],
                mode='markers+text',
                marker=dict(
                    size=28,
                    color='#4a90e2',
                    line=dict(color='#2c5aa0', width=2)
                ),
                text=[n.label for n in operator_nodes],
                textposition='middle center',
                textfont=dict(size=14, color='white'),
                hoverinfo='text',
                hovertext=[f"{n.children[0].value:g} {n.label} {n.children[1].value:g} = {n.value:g}"
                           for n in operator_nodes],
                name='Operator',
                showlegend=True
            ))

        if number_nodes:
            fig.add_trace(go.Scatter(
                x=[positions[n.id][0] for n in number_nodes],
                y=[positions[n.id][1] for n in number_nodes],
                mode='markers+text',
                marker=dict(
                    size=20,
                    color='#52c41a',
                    line=dict(color='#389e0d', width=2)
                ),
                text=[n.label for n in number_nodes],
                textposition='bottom center',
                textfont=dict(size=12),
                hoverinfo='text',
                hovertext=[f"Number: {n.label}" for n in number_nodes],
                name='Number',
                showlegend=True
            ))

        fig.update_layout(
            title=dict(
                text=f"Expression Tree: {self.expression}<br>"
                     f"<sup>Result: {self.result.value:g} | Depth: {self.tree.depth()} | "
                     f"Postfix: {format_tokens(self.result.postfix)}</sup>",
                x=0.5,
                font=dict(size=18)
            ),
            showlegend=True,
            legend=dict(
                yanchor="top",
                y=0.99,
                xanchor="left",
                x=0.01,
                bgcolor='rgba(255,255,255,0.8)'
            ),
            hovermode='closest',
            xaxis=dict(showgrid=False, zeroline=False, showticklabels=False, title=''),
            yaxis=dict(showgrid=False, zeroline=False, showticklabels=False, title=''),
            plot_bgcolor='white',
            paper_bgcolor='#f5f5f5',
            margin=dict(l=40, r=40, t=80, b=40)
        )
        return fig

    def generate_visualization(self, output_file: str = "expression_tree.html") -> str:
        """
        Generate interactive Plotly visualization.

        Args:
            output_file: Path to save HTML file

        Returns:
            The path written
        """
        fig = self.build_figure()
        fig.write_html(output_file)
        return output_file

    def generate_html(self, output_file: str = "expression_tree.html") -> str:
        """Alias for generate_visualization."""
        return self.generate_visualization(output_file)


if __name__ == "__main__":
    from evaluator import evaluate

    for expr, out in [("3+2*4", "test_tree.html"), ("(2+3)*(4-1)", "test_tree2.html")]:
        visualizer = TreeVisualizer(evaluate(expr), expr)
        print(f"Visualization saved to: {visualizer.generate_html(out)}")
