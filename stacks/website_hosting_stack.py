import tldextract
from typing import Any
from aws_cdk import (
    Stack,
    CfnOutput,
    aws_s3 as s3,
    aws_certificatemanager as acm,
    aws_cloudfront as cloudfront,
    aws_cloudfront_origins as origins,
    aws_route53 as route53,
    aws_route53_targets as targets,
)
from constructs import Construct

# Key prefixes inside the website bucket
FRONTEND_PREFIX = "frontend"
IMAGES_PREFIX = "images"

# Single-page app routing: extensionless paths serve the bundle entry point.
# Attached to the default behavior only, so missing images stay 403/404.
SPA_ROUTING_FUNCTION_CODE = """function handler(event) {
  var request = event.request;
  var uri = request.uri;
  if (uri.lastIndexOf(".") < uri.lastIndexOf("/")) {
    request.uri = "/index.html";
  }
  return request;
}
"""

class WebsiteHostingStack(Stack):
    """
    Deploys the static website hosting infrastructure:
    1. Private S3 bucket holding the front-end bundle and the coffee images.
    2. CloudFront Distribution reading the bucket through Origin Access Control.
    3. Optional Route53 alias records when a custom domain and certificate are configured.
    """
    def __init__(self, scope: Construct, construct_id: str, config: Any, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # =================================================================
        # 1. WEBSITE S3 BUCKET
        # =================================================================
        self.bucket = s3.Bucket(self, "WebsiteBucket",
            encryption=s3.BucketEncryption.S3_MANAGED,
            block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
            enforce_ssl=True,
            removal_policy=config.removal_policy,
            auto_delete_objects=config.auto_delete_objects,
            # Browsers upload images straight to S3 with presigned URLs
            cors=[s3.CorsRule(
                allowed_methods=[s3.HttpMethods.PUT],
                allowed_origins=["*"],
                allowed_headers=["*"]
            )]
        )

        # =================================================================
        # 2. CLOUDFRONT DISTRIBUTION
        # =================================================================
        # The post-deploy step uploads the bundle under 'frontend/',
        # the API stores uploads under 'images/'.
        frontend_origin = origins.S3BucketOrigin.with_origin_access_control(
            self.bucket,
            origin_path=f"/{FRONTEND_PREFIX}"
        )
        images_origin = origins.S3BucketOrigin.with_origin_access_control(self.bucket)

        certificate = None
        domain_names = None
        if config.has_custom_domain:
            certificate = acm.Certificate.from_certificate_arn(self, "SiteCertificate", config.certificate_arn)
            domain_names = [config.domain_name]

        spa_routing_fn = cloudfront.Function(self, "SpaRoutingFn",
            code=cloudfront.FunctionCode.from_inline(SPA_ROUTING_FUNCTION_CODE),
            comment="Rewrites front-end routes to /index.html"
        )

        self.distribution = cloudfront.Distribution(self, "WebsiteDist",
            default_root_object="index.html",
            price_class=cloudfront.PriceClass.PRICE_CLASS_100,
            certificate=certificate,
            domain_names=domain_names,

            # Front-end Bundle Behavior (Cached)
            default_behavior=cloudfront.BehaviorOptions(
                origin=frontend_origin,
                viewer_protocol_policy=cloudfront.ViewerProtocolPolicy.REDIRECT_TO_HTTPS,
                cache_policy=cloudfront.CachePolicy.CACHING_OPTIMIZED,
                compress=True,
                function_associations=[cloudfront.FunctionAssociation(
                    function=spa_routing_fn,
                    event_type=cloudfront.FunctionEventType.VIEWER_REQUEST
                )]
            ),

            # Coffee Images Behavior (Cached, bucket root)
            additional_behaviors={
                f"{IMAGES_PREFIX}/*": cloudfront.BehaviorOptions(
                    origin=images_origin,
                    viewer_protocol_policy=cloudfront.ViewerProtocolPolicy.REDIRECT_TO_HTTPS,
                    cache_policy=cloudfront.CachePolicy.CACHING_OPTIMIZED,
                    compress=True
                )
            }
        )

        # =================================================================
        # 3. DNS MANAGEMENT (Route53)
        # =================================================================
        if config.has_custom_domain:
            extracted = tldextract.extract(config.domain_name)
            zone_name = f"{extracted.domain}.{extracted.suffix}"
            hosted_zone = route53.HostedZone.from_lookup(self, "SiteZone", domain_name=zone_name)
            subdomain = extracted.subdomain if extracted.subdomain else None

            route53.ARecord(self, "AliasRecord",
                zone=hosted_zone,
                record_name=subdomain,
                target=route53.RecordTarget.from_alias(targets.CloudFrontTarget(self.distribution))
            )
            route53.AaaaRecord(self, "AliasRecordIPv6",
                zone=hosted_zone,
                record_name=subdomain,
                target=route53.RecordTarget.from_alias(targets.CloudFrontTarget(self.distribution))
            )

        # =================================================================
        # 4. OUTPUTS
        # =================================================================
        self.cfn_out_cloud_front_url = CfnOutput(self, "CloudFrontUrl",
            value=f"https://{self.distribution.distribution_domain_name}",
            description="CloudFront URL of the website"
        )
        self.cfn_out_bucket_name = CfnOutput(self, "BucketName",
            value=self.bucket.bucket_name,
            description="Website S3 bucket name"
        )
        self.cfn_out_distribution_id = CfnOutput(self, "DistributionId",
            value=self.distribution.distribution_id,
            description="CloudFront Distribution ID"
        )
