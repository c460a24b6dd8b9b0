import os
from typing import Optional
from dotenv import load_dotenv
from aws_cdk import RemovalPolicy

# Load environment variables from a .env file
load_dotenv()

DEFAULT_STACK_NAME = "CoffeeListingAppStack"
DEFAULT_BRANCH = "main"

class EnvConfig:
    """
    Stores environment-specific configuration for the CDK stacks.
    """
    def __init__(
        self,
        env_name: str,
        account: str,
        region: str,
        github_repository: str,
        github_branch: str = DEFAULT_BRANCH,
        stack_name: str = DEFAULT_STACK_NAME,
        domain: Optional[str] = None,
        certificate_arn: Optional[str] = None
    ):
        self.name = env_name
        self.account = account
        self.region = region
        self.stack_name = stack_name

        # GitHub Configuration ("owner/repo")
        self.github_repository = github_repository
        self.github_branch = github_branch

        # Custom domain is only wired when both values are present
        self.domain_name = domain
        self.certificate_arn = certificate_arn

        # Data Lifecycle Policy:
        # In 'prod', we retain the website bucket and its images.
        # In other environments, we clean up to save costs.
        if env_name == 'prod':
            self.removal_policy = RemovalPolicy.RETAIN
            self.auto_delete_objects = False
        else:
            self.removal_policy = RemovalPolicy.DESTROY
            self.auto_delete_objects = True

    @property
    def has_custom_domain(self) -> bool:
        return bool(self.domain_name and self.certificate_arn)

def get_required_env(key: str) -> str:
    """
    Retrieves a required environment variable or raises a RuntimeError if missing.
    """
    value = os.getenv(key)
    if not value:
        raise RuntimeError(f"❌ MISSING CONFIG: Required environment variable '{key}' not found in .env")
    return value

def get_config(scope) -> EnvConfig:
    """
    Factory function to generate the EnvConfig object based on CDK context.
    Usage: cdk deploy -c env=prod
    """
    # Default to 'dev' environment if no context is provided
    env_name = scope.node.try_get_context("env") or "dev"
    prefix = env_name.upper()

    print(f"🔍 Initializing Coffee Listing App infrastructure for environment: {prefix}")

    # Load Mandatory Variables
    account = get_required_env(f"{prefix}_ACCOUNT")
    region = get_required_env(f"{prefix}_REGION")
    github_repo = get_required_env("GITHUB_REPOSITORY")

    # Load Optional Variables
    github_branch = os.getenv("GITHUB_BRANCH") or DEFAULT_BRANCH
    stack_name = os.getenv(f"{prefix}_STACK_NAME") or DEFAULT_STACK_NAME
    domain = os.getenv(f"{prefix}_DOMAIN_NAME")
    certificate_arn = os.getenv(f"{prefix}_CERTIFICATE_ARN")

    if domain and not certificate_arn:
        print(f"⏭️ Skipping custom domain '{domain}': {prefix}_CERTIFICATE_ARN is not set")

    return EnvConfig(
        env_name=env_name,
        account=account,
        region=region,
        github_repository=github_repo,
        github_branch=github_branch,
        stack_name=stack_name,
        domain=domain,
        certificate_arn=certificate_arn
    )
