import os

import pytest

# Config and logging are initialized at import time, so set the environment at module level.
os.environ["LOG_CONFIG_PATH"] = "/tmp/offline-sqs-invoke-missing-logging.yml"
os.environ["SERVERLESS_CONFIG_PATH"] = "/tmp/offline-sqs-invoke-missing-serverless.yml"
os.environ["LAMBDA_ENDPOINT"] = "http://lambda.test:3002"


@pytest.fixture
def resources():
    return {
        "OrdersQueue": {"Type": "AWS::SQS::Queue", "Properties": {"QueueName": "orders"}},
        "InvoicesQueue": {"Type": "AWS::SQS::Queue", "Properties": {"QueueName": "invoices"}},
        "AuditBucket": {"Type": "AWS::S3::Bucket", "Properties": {"BucketName": "audit"}},
    }


@pytest.fixture
def functions():
    return {
        "processOrder": {
            "name": "shop-dev-processOrder",
            "events": [{"sqs": {"arn": {"Fn::GetAtt": ["OrdersQueue", "Arn"]}}}],
        },
        "processInvoice": {
            "name": "shop-dev-processInvoice",
            "events": [
                {"http": {"path": "/invoices", "method": "get"}},
                {"sqs": {"arn": "arn:aws:sqs:localhost:000000000000:invoices"}},
            ],
        },
    }
