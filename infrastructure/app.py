import aws_cdk as cdk

from stack import ImageProcessingStack

app = cdk.App()

bucket_name = app.node.try_get_context("bucket_name")
create_bucket = str(app.node.try_get_context("create_bucket") or "true").lower() == "true"

ImageProcessingStack(app, "ImageProcessingStack",
    bucket_name=bucket_name,
    create_bucket=create_bucket,
)

app.synth()
