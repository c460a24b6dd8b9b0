import aws_cdk as cdk
from aws_cdk import (
    Stack,
    CfnOutput,
    pipelines,
    aws_codestarconnections as codestar,
    aws_iam as iam,
)
from constructs import Construct

from stacks.app_stage import AppStage
from stacks.shared.naming import connection_name, pipeline_name

SYNTH_INSTALL_COMMANDS = [
    "npm i -g npm@latest",
    "npm i -g aws-cdk",
]

SYNTH_COMMANDS = [
    "pip install -e .",
    "cdk synth -c env=$CDK_CONTEXT_ENV",
]

DEPLOY_FRONT_END_COMMANDS = [
    "cd frontend",
    "npm ci",
    "npm run build",
    "aws s3 cp ./src/build s3://$BUCKET_NAME/frontend --recursive",
    'aws cloudfront create-invalidation --distribution-id $DISTRIBUTION_ID --paths "/*"',
]

class PipelineStack(Stack):
    """
    Deploys the CI/CD Pipeline for the Coffee Listing App.

    This stack automates the following workflow:
    1. Source: Pulls the latest code from GitHub via a CodeStar Connection created here.
    2. Synth: Installs the project and synthesizes the CDK application.
    3. Deploy: Provisions the AppStage (website hosting + REST API stacks).
    4. Post-deploy: Builds the front-end bundle, uploads it to S3 and invalidates the CloudFront cache.
    """

    def __init__(self, scope: Construct, construct_id: str, config, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # =================================================================
        # 1. SOURCE CONNECTION (GitHub)
        # =================================================================
        # Stays PENDING until the handshake is completed in the AWS console
        self.connection = codestar.CfnConnection(self, "GitHubConnection",
            connection_name=connection_name("CoffeeListingApp"),
            provider_type="GitHub"
        )

        # =================================================================
        # 2. APPLICATION STAGE
        # =================================================================
        self.app_stage = AppStage(self, "AppStage",
            stack_name=self.stack_name,
            config=config,
            env=cdk.Environment(account=config.account, region=config.region)
        )

        # =================================================================
        # 3. CDK PIPELINE
        # =================================================================
        self.pipeline = pipelines.CodePipeline(self, "Pipeline",
            pipeline_name=pipeline_name(self.stack_name),
            self_mutation=False,
            publish_assets_in_parallel=False,
            synth=pipelines.ShellStep("Synth",
                input=pipelines.CodePipelineSource.connection(
                    config.github_repository,
                    config.github_branch,
                    connection_arn=self.connection.attr_connection_arn
                ),
                # CodeBuild has no .env file: hand the synth the same configuration
                env=synth_environment(config),
                install_commands=SYNTH_INSTALL_COMMANDS,
                commands=SYNTH_COMMANDS
            ),
            code_build_defaults=pipelines.CodeBuildOptions(
                role_policy=build_role_policy(config)
            )
        )

        # =================================================================
        # 4. POST-DEPLOY FRONT-END STEP
        # =================================================================
        self.deploy_front_end = pipelines.ShellStep("DeployFrontEnd",
            env_from_cfn_outputs={
                "SNOWPACK_PUBLIC_CLOUDFRONT_URL": self.app_stage.cfn_out_cloud_front_url,
                "SNOWPACK_PUBLIC_API_IMAGES_URL": self.app_stage.cfn_out_api_images_url,
                "BUCKET_NAME": self.app_stage.cfn_out_bucket_name,
                "DISTRIBUTION_ID": self.app_stage.cfn_out_distribution_id,
            },
            commands=DEPLOY_FRONT_END_COMMANDS
        )

        self.pipeline.add_stage(self.app_stage, post=[self.deploy_front_end])

        CfnOutput(self, "GitHubConnectionArn",
            value=self.connection.attr_connection_arn,
            description="GitHub Connection ARN"
        )


def synth_environment(config) -> dict:
    """
    Environment variables that let `cdk synth` rebuild the same EnvConfig inside CodeBuild.
    """
    prefix = config.name.upper()
    env = {
        f"{prefix}_ACCOUNT": config.account,
        f"{prefix}_REGION": config.region,
        f"{prefix}_STACK_NAME": config.stack_name,
        "GITHUB_REPOSITORY": config.github_repository,
        "GITHUB_BRANCH": config.github_branch,
        "CDK_CONTEXT_ENV": config.name,
    }
    if config.has_custom_domain:
        env[f"{prefix}_DOMAIN_NAME"] = config.domain_name
        env[f"{prefix}_CERTIFICATE_ARN"] = config.certificate_arn
    return env


def build_role_policy(config) -> list:
    """
    Statements shared by every CodeBuild project of the pipeline.
    """
    # Coarse grant: the post-deploy step uploads and invalidates without resource scoping
    statements = [
        iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=["s3:*"],
            resources=["*"]
        ),
        iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=["cloudfront:*"],
            resources=["*"]
        ),
    ]

    # The synth resolves HostedZone.from_lookup through the bootstrap lookup role
    if config.has_custom_domain:
        statements.append(iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=["sts:AssumeRole"],
            resources=[f"arn:aws:iam::{config.account}:role/cdk-*-lookup-role-{config.account}-*"]
        ))
    return statements
