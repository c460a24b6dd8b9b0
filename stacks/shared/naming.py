"""
Naming helpers for the Coffee Listing App stacks.

CloudFormation, CodePipeline and CodeStar Connections all cap name lengths,
so every derived name is built from a fixed-length prefix of the root stack name.

Examples:
  - Pipeline-CoffeeListingAppStack
  - WebHosting-CoffeeListingAppStack
  - RestApi-CoffeeListingAppStack
"""

# Characters of the root stack name carried into derived names
STACK_NAME_SLICE = 20

# CodeStar Connections rejects names longer than this
CONNECTION_NAME_MAX = 32


def truncate(name: str, max_length: int) -> str:
    """
    Return the first ``max_length`` characters of ``name``.

    Args:
        name: Name to shorten
        max_length: Maximum number of characters to keep

    Returns:
        ``name`` unchanged when it already fits, otherwise its prefix
    """
    if max_length < 0:
        raise ValueError(f"max_length must be non-negative, got {max_length}")
    return name[:max_length]


def child_stack_name(prefix: str, stack_name: str) -> str:
    """
    Generate the name of a stack deployed by the application stage.

    Pattern: {prefix}-{stack_name[:20]}
    Example: WebHosting-CoffeeListingAppStack
    """
    return f"{prefix}-{truncate(stack_name, STACK_NAME_SLICE)}"


def pipeline_name(stack_name: str) -> str:
    """Pattern: Pipeline-{stack_name[:20]}"""
    return child_stack_name("Pipeline", stack_name)


def connection_name(app_name: str) -> str:
    """Generate a CodeStar connection name that fits the 32 character limit."""
    return truncate(f"{app_name}GitHubConn", CONNECTION_NAME_MAX)
