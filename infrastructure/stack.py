from aws_cdk import (
    Stack,
    CfnOutput,
    aws_s3 as s3,
    aws_lambda as _lambda,
    aws_apigateway as apigw,
    aws_s3_notifications as s3_notify,
    Duration,
    RemovalPolicy,
)
from constructs import Construct
import os

LAMBDA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), '..', 'lambda')


class ImageProcessingStack(Stack):

    def __init__(self, scope: Construct, construct_id: str, bucket_name: str = None,
                 create_bucket: bool = True, upload_prefix: str = "uploads/",
                 output_prefix: str = "processed/", **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # 1. Upload bucket, either owned by this stack or an existing one
        if create_bucket:
            bucket = s3.Bucket(self, "ImageBucket",
                bucket_name=bucket_name,
                versioned=True,
                block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
                removal_policy=RemovalPolicy.RETAIN,
            )
        else:
            if not bucket_name:
                raise ValueError("bucket_name is required when create_bucket is False")
            bucket = s3.Bucket.from_bucket_name(self, "ImageBucket", bucket_name)

        # 2. Container image for the function, built from the lambda directory
        image_func = _lambda.DockerImageFunction(self, "ImageProcessor",
            code=_lambda.DockerImageCode.from_image_asset(LAMBDA_DIR),
            memory_size=1536,
            timeout=Duration.seconds(30),
            environment={
                "OUTPUT_PREFIX": output_prefix,
                "JPEG_QUALITY": "90",
                "LOG_LEVEL": "INFO",
                "MAX_RESIZE_DIMENSION": "10000",
            }
        )

        # 3. Read the source objects and write the processed ones
        bucket.grant_read_write(image_func)

        # 4. Storage-event path: new objects under the upload prefix only,
        # so processed output never re-triggers the function
        bucket.add_event_notification(
            s3.EventType.OBJECT_CREATED,
            s3_notify.LambdaDestination(image_func),
            s3.NotificationKeyFilter(prefix=upload_prefix)
        )

        # 5. HTTP path: POST /process
        api = apigw.RestApi(self, "ImageAPI",
            rest_api_name="ImageProcessingAPI",
            description="API for image transformations",
            deploy_options=apigw.StageOptions(stage_name="prod"),
        )
        process = api.root.add_resource("process")
        process.add_method("POST", apigw.LambdaIntegration(image_func))

        CfnOutput(self, "ApiEndpoint",
            value=api.url_for_path("/process"),
            description="API Gateway endpoint URL",
        )
        CfnOutput(self, "S3BucketName",
            value=bucket.bucket_name,
            description="Upload bucket name",
        )
