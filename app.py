import aws_cdk as cdk
from config import get_config
from stacks.pipeline_stack import PipelineStack

app = cdk.App()
config = get_config(app)

# =================================================================
# PIPELINE STACK
# =================================================================
# Owns the GitHub connection and the CDK Pipeline. The pipeline deploys
# the AppStage (WebHosting-* and RestApi-* stacks) and then the front end.
main_env = cdk.Environment(account=config.account, region=config.region)
pipeline_stack = PipelineStack(
    app, config.stack_name,
    config=config,
    stack_name=config.stack_name,
    env=main_env
)

app.synth()
