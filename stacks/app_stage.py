from typing import Any
import aws_cdk as cdk
from constructs import Construct

from stacks.rest_api_stack import RestApiStack
from stacks.shared.naming import child_stack_name
from stacks.website_hosting_stack import WebsiteHostingStack


class AppStage(cdk.Stage):
    """
    Deployment stage grouping the website hosting and REST API stacks.

    Re-exports the outputs the pipeline's DeployFrontEnd step reads.
    """

    def __init__(self, scope: Construct, construct_id: str, stack_name: str, config: Any, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # Hosting first: the API consumes its bucket and distribution
        self.website_hosting = WebsiteHostingStack(
            self, "WebsiteHostingStack",
            config=config,
            stack_name=child_stack_name("WebHosting", stack_name)
        )
        self.rest_api = RestApiStack(
            self, "RestApiStack",
            bucket=self.website_hosting.bucket,
            distribution=self.website_hosting.distribution,
            stack_name=child_stack_name("RestApi", stack_name)
        )

        self.cfn_out_api_images_url = self.rest_api.cfn_out_api_images_url
        self.cfn_out_cloud_front_url = self.website_hosting.cfn_out_cloud_front_url
        self.cfn_out_bucket_name = self.website_hosting.cfn_out_bucket_name
        self.cfn_out_distribution_id = self.website_hosting.cfn_out_distribution_id
