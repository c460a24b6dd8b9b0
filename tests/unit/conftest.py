import aws_cdk as core
import pytest

from config import EnvConfig

TEST_ACCOUNT = "123456789012"
TEST_REGION = "us-east-1"


@pytest.fixture
def env_config():
    return EnvConfig(
        env_name="dev",
        account=TEST_ACCOUNT,
        region=TEST_REGION,
        github_repository="MarcoMurphy2000/coffee-listing-app",
    )


@pytest.fixture
def test_env():
    return core.Environment(account=TEST_ACCOUNT, region=TEST_REGION)
