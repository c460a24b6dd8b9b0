import aws_cdk as core
import aws_cdk.assertions as assertions

from config import EnvConfig
from stacks.website_hosting_stack import WebsiteHostingStack

TEST_ACCOUNT = "123456789012"
TEST_REGION = "us-east-1"

HOSTED_ZONE_CONTEXT = {
    f"hosted-zone:account={TEST_ACCOUNT}:domainName=example.com:region={TEST_REGION}": {
        "Id": "/hostedzone/Z0123456789ABCDEFGHIJ",
        "Name": "example.com.",
    }
}


def test_bucket_is_private_and_encrypted(env_config, test_env):
    app = core.App()
    stack = WebsiteHostingStack(app, "WebsiteHostingStack", config=env_config, env=test_env)
    template = assertions.Template.from_stack(stack)

    template.resource_count_is("AWS::S3::Bucket", 1)
    template.has_resource_properties("AWS::S3::Bucket", {
        "PublicAccessBlockConfiguration": {
            "BlockPublicAcls": True,
            "BlockPublicPolicy": True,
            "IgnorePublicAcls": True,
            "RestrictPublicBuckets": True,
        },
        "BucketEncryption": {
            "ServerSideEncryptionConfiguration": [
                {"ServerSideEncryptionByDefault": {"SSEAlgorithm": "AES256"}}
            ]
        },
    })


def test_distribution_serves_frontend_and_images(env_config, test_env):
    app = core.App()
    stack = WebsiteHostingStack(app, "WebsiteHostingStack", config=env_config, env=test_env)
    template = assertions.Template.from_stack(stack)

    template.resource_count_is("AWS::CloudFront::Distribution", 1)
    template.has_resource_properties("AWS::CloudFront::Distribution", {
        "DistributionConfig": assertions.Match.object_like({
            "DefaultRootObject": "index.html",
            "Origins": assertions.Match.array_with([
                assertions.Match.object_like({"OriginPath": "/frontend"})
            ]),
            "CacheBehaviors": [
                assertions.Match.object_like({"PathPattern": "images/*"})
            ],
            # Error rewrites would also turn missing images into 200 HTML
            "CustomErrorResponses": assertions.Match.absent(),
        })
    })
    template.resource_count_is("AWS::Route53::RecordSet", 0)


def test_spa_routing_only_applies_to_frontend(env_config, test_env):
    app = core.App()
    stack = WebsiteHostingStack(app, "WebsiteHostingStack", config=env_config, env=test_env)
    template = assertions.Template.from_stack(stack)

    template.resource_count_is("AWS::CloudFront::Function", 1)
    template.has_resource_properties("AWS::CloudFront::Distribution", {
        "DistributionConfig": assertions.Match.object_like({
            "DefaultCacheBehavior": assertions.Match.object_like({
                "FunctionAssociations": [
                    assertions.Match.object_like({"EventType": "viewer-request"})
                ]
            }),
            "CacheBehaviors": [
                assertions.Match.object_like({
                    "PathPattern": "images/*",
                    "FunctionAssociations": assertions.Match.absent(),
                })
            ],
        })
    })


def test_dev_bucket_is_destroyed_with_stack(env_config, test_env):
    app = core.App()
    stack = WebsiteHostingStack(app, "WebsiteHostingStack", config=env_config, env=test_env)
    template = assertions.Template.from_stack(stack)

    template.has_resource("AWS::S3::Bucket", {"DeletionPolicy": "Delete"})


def test_prod_bucket_is_retained(test_env):
    config = EnvConfig("prod", TEST_ACCOUNT, TEST_REGION, "MarcoMurphy2000/coffee-listing-app")
    app = core.App()
    stack = WebsiteHostingStack(app, "WebsiteHostingStack", config=config, env=test_env)
    template = assertions.Template.from_stack(stack)

    template.has_resource("AWS::S3::Bucket", {"DeletionPolicy": "Retain"})


def test_custom_domain_creates_alias_records(test_env):
    config = EnvConfig(
        "dev", TEST_ACCOUNT, TEST_REGION, "MarcoMurphy2000/coffee-listing-app",
        domain="coffee.example.com",
        certificate_arn=f"arn:aws:acm:us-east-1:{TEST_ACCOUNT}:certificate/abc-123"
    )
    app = core.App(context=HOSTED_ZONE_CONTEXT)
    stack = WebsiteHostingStack(app, "WebsiteHostingStack", config=config, env=test_env)
    template = assertions.Template.from_stack(stack)

    template.has_resource_properties("AWS::CloudFront::Distribution", {
        "DistributionConfig": assertions.Match.object_like({
            "Aliases": ["coffee.example.com"]
        })
    })
    template.has_resource_properties("AWS::Route53::RecordSet", {"Type": "A"})
    template.has_resource_properties("AWS::Route53::RecordSet", {"Type": "AAAA"})
