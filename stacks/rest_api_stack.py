import os
from aws_cdk import (
    Stack,
    CfnOutput,
    Duration,
    aws_apigateway as apigw,
    aws_cloudfront as cloudfront,
    aws_lambda as lambda_,
    aws_s3 as s3,
)
from constructs import Construct

from stacks.website_hosting_stack import IMAGES_PREFIX

LAMBDA_ASSET_DIR = os.path.join(os.path.dirname(__file__), "..", "lambda", "coffee_images")

class RestApiStack(Stack):
    """
    Deploys the coffee images REST API:
    1. Lambda Function listing images and issuing presigned upload URLs.
    2. API Gateway REST API exposing GET/POST /images.

    The website bucket and distribution come from the WebsiteHostingStack,
    so this stack must be constructed after it.
    """
    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        bucket: s3.IBucket,
        distribution: cloudfront.IDistribution,
        **kwargs
    ) -> None:
        if bucket is None or distribution is None:
            raise ValueError("RestApiStack requires the website bucket and distribution")

        super().__init__(scope, construct_id, **kwargs)

        self.bucket = bucket
        self.distribution = distribution

        # =================================================================
        # 1. COFFEE IMAGES FUNCTION
        # =================================================================
        self.images_fn = lambda_.Function(self, "CoffeeImagesFn",
            runtime=lambda_.Runtime.PYTHON_3_12,
            handler="main.lambda_handler",
            code=lambda_.Code.from_asset(LAMBDA_ASSET_DIR),
            timeout=Duration.seconds(10),
            environment={
                "BUCKET_NAME": bucket.bucket_name,
                "CLOUDFRONT_DOMAIN": distribution.distribution_domain_name,
                "IMAGES_PREFIX": IMAGES_PREFIX
            }
        )

        # Scoped to the images prefix only
        bucket.grant_read(self.images_fn, f"{IMAGES_PREFIX}/*")
        bucket.grant_put(self.images_fn, f"{IMAGES_PREFIX}/*")

        # =================================================================
        # 2. API GATEWAY
        # =================================================================
        self.api = apigw.RestApi(self, "CoffeeListingApi",
            description="Coffee Listing App images API",
            default_cors_preflight_options=apigw.CorsOptions(
                allow_origins=apigw.Cors.ALL_ORIGINS,
                allow_methods=apigw.Cors.ALL_METHODS
            )
        )

        images = self.api.root.add_resource(IMAGES_PREFIX)
        images_integration = apigw.LambdaIntegration(self.images_fn, proxy=True)
        images.add_method("GET", images_integration)
        images.add_method("POST", images_integration)

        # =================================================================
        # 3. OUTPUTS
        # =================================================================
        self.cfn_out_api_images_url = CfnOutput(self, "ApiImagesUrl",
            value=f"{self.api.url}{IMAGES_PREFIX}",
            description="Coffee images API endpoint"
        )
