"""
Basic usage example for the ReAct agent framework.

Set OPENAI_API_KEY (or DEEPSEEK_API_KEY and pass ``"deepseek"``) before running.
"""

import ast
import logging
import operator

from react_agents import AgentType, Tool, initialize_agent_executor
from react_agents.llm import create_chat_completion_client

_OPERATORS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.USub: operator.neg,
}


def _evaluate(node: ast.AST) -> float:
    if isinstance(node, ast.Expression):
        return _evaluate(node.body)
    if isinstance(node, ast.Constant) and isinstance(node.value, (int, float)):
        return node.value
    if isinstance(node, ast.BinOp) and type(node.op) in _OPERATORS:
        return _OPERATORS[type(node.op)](_evaluate(node.left), _evaluate(node.right))
    if isinstance(node, ast.UnaryOp) and type(node.op) in _OPERATORS:
        return _OPERATORS[type(node.op)](_evaluate(node.operand))
    raise ValueError(f"Unsupported expression element: {ast.dump(node)}")


def calculator(expression: str) -> str:
    return str(_evaluate(ast.parse(expression, mode="eval")))


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    llm = create_chat_completion_client("openai", model="gpt-4o-mini")
    executor = initialize_agent_executor(
        [
            Tool(
                name="calculator",
                description="Evaluates arithmetic expressions such as (24 + 18) * 0.75.",
                func=calculator,
            )
        ],
        llm,
        AgentType.CHAT_CONVERSATIONAL_REACT_DESCRIPTION,
        max_iterations=5,
        verbose=True,
    )
    first = executor.run("What is (24 + 18) * 0.75?", session_id="demo")
    print("Final answer:", first.output)
    follow_up = executor.run("Now double that.", session_id="demo")
    print("Follow-up:", follow_up.output)


if __name__ == "__main__":
    main()
