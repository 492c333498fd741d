import logging

import pytest

from services.sqs_invoke.core.exceptions import DefinitionLoadError
from services.sqs_invoke.services.definition_loader import (
    load_service_definitions,
    parse_service_definitions,
)
from services.sqs_invoke.services.queue_resolver import resolve


SERVERLESS_YML = """
service: shop

provider:
  name: aws
  stage: ${opt:stage, 'dev'}

custom:
  ordersQueueName: ${self:service}-orders-${sls:stage}

functions:
  processOrder:
    handler: handler.process_order
    events:
      - sqs:
          arn: !GetAtt OrdersQueue.Arn
  processInvoice:
    name: invoice-worker
    handler: handler.process_invoice
    events:
      - sqs:
          arn:
            Fn::GetAtt: [InvoicesQueue, Arn]
  ping:
    handler: handler.ping
    events:
      - http:
          path: /ping
          method: get

resources:
  Resources:
    OrdersQueue:
      Type: AWS::SQS::Queue
      Properties:
        QueueName: ${self:custom.ordersQueueName}
    InvoicesQueue:
      Type: AWS::SQS::Queue
      Properties:
        QueueName: invoices
        RedrivePolicy:
          deadLetterTargetArn: !GetAtt [DeadLetterQueue, Arn]
          maxReceiveCount: 3
    DeadLetterQueue:
      Type: AWS::SQS::Queue
      Properties:
        QueueName: !Sub "${AWS::StackName}-dlq"
"""


def test_short_form_tags_become_long_form():
    definitions = parse_service_definitions(SERVERLESS_YML, stage="dev")

    events = definitions.functions["processOrder"]["events"]
    assert events[0]["sqs"]["arn"] == {"Fn::GetAtt": ["OrdersQueue", "Arn"]}

    redrive = definitions.resources["InvoicesQueue"]["Properties"]["RedrivePolicy"]
    assert redrive["deadLetterTargetArn"] == {"Fn::GetAtt": ["DeadLetterQueue", "Arn"]}

    dlq_name = definitions.resources["DeadLetterQueue"]["Properties"]["QueueName"]
    assert dlq_name == {"Fn::Sub": "${AWS::StackName}-dlq"}


def test_serverless_variables_are_resolved():
    definitions = parse_service_definitions(SERVERLESS_YML, stage="local")

    assert definitions.service == "shop"
    assert definitions.stage == "local"
    queue_name = definitions.resources["OrdersQueue"]["Properties"]["QueueName"]
    assert queue_name == "shop-orders-local"


def test_default_function_names():
    definitions = parse_service_definitions(SERVERLESS_YML, stage="dev")

    assert definitions.functions["processOrder"]["name"] == "shop-dev-processOrder"
    assert definitions.functions["processInvoice"]["name"] == "invoice-worker"
    assert definitions.functions["ping"]["name"] == "shop-dev-ping"


def test_env_variables_and_unresolved_variables(monkeypatch):
    monkeypatch.setenv("ORDERS_QUEUE", "orders-from-env")
    content = """
service:
  name: legacy
functions: {}
resources:
  Resources:
    Orders:
      Type: AWS::SQS::Queue
      Properties:
        QueueName: ${env:ORDERS_QUEUE}
    Other:
      Type: AWS::SQS::Queue
      Properties:
        QueueName: ${ssm:/queues/other}
"""
    definitions = parse_service_definitions(content)

    assert definitions.service == "legacy"
    assert definitions.resources["Orders"]["Properties"]["QueueName"] == "orders-from-env"
    assert definitions.resources["Other"]["Properties"]["QueueName"] == "${ssm:/queues/other}"


def test_parsed_definitions_resolve_end_to_end():
    definitions = parse_service_definitions(SERVERLESS_YML, stage="dev")

    handler_map = resolve(definitions.resources, definitions.functions)

    assert handler_map.handler_for("shop-orders-dev") == "shop-dev-processOrder"
    assert handler_map.handler_for("invoices") == "invoice-worker"
    # QueueName is an unresolved intrinsic, so the queue is skipped
    assert len(handler_map) == 2


def test_missing_sections_yield_empty_definitions():
    definitions = parse_service_definitions("service: empty\n")

    assert definitions.resources == {}
    assert definitions.functions == {}


def test_load_service_definitions_from_file(tmp_path):
    path = tmp_path / "serverless.yml"
    path.write_text(SERVERLESS_YML, encoding="utf-8")

    definitions = load_service_definitions(str(path), stage="dev")

    assert set(definitions.resources) == {"OrdersQueue", "InvoicesQueue", "DeadLetterQueue"}


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(DefinitionLoadError) as exc:
        load_service_definitions(str(tmp_path / "missing.yml"))

    assert "missing.yml" in str(exc.value)


def test_load_invalid_yaml_raises(tmp_path):
    path = tmp_path / "serverless.yml"
    path.write_text("functions: [unclosed\n", encoding="utf-8")

    with pytest.raises(DefinitionLoadError):
        load_service_definitions(str(path))


LIST_SECTIONS_YML = """
service: shop
functions:
  - processOrder:
      handler: handler.process_order
      events:
        - sqs:
            arn: !GetAtt OrdersQueue.Arn
  - processInvoice:
      handler: handler.process_invoice
      events:
        - sqs:
            arn: !GetAtt InvoicesQueue.Arn
resources:
  - Resources:
      OrdersQueue:
        Type: AWS::SQS::Queue
        Properties:
          QueueName: orders
  - Resources:
      InvoicesQueue:
        Type: AWS::SQS::Queue
        Properties:
          QueueName: invoices
    Outputs:
      InvoicesQueueArn:
        Value: !GetAtt InvoicesQueue.Arn
"""


def test_list_form_sections_are_merged_in_order():
    definitions = parse_service_definitions(LIST_SECTIONS_YML, stage="dev")

    assert list(definitions.functions) == ["processOrder", "processInvoice"]
    assert list(definitions.resources) == ["OrdersQueue", "InvoicesQueue"]

    handler_map = resolve(definitions.resources, definitions.functions)
    assert handler_map.handler_for("orders") == "shop-dev-processOrder"
    assert handler_map.handler_for("invoices") == "shop-dev-processInvoice"


def test_scalar_sections_are_ignored_with_error(caplog):
    content = """
service: shop
functions: processOrder
resources:
  Resources: not-a-mapping
"""
    with caplog.at_level(logging.ERROR):
        definitions = parse_service_definitions(content)

    assert definitions.functions == {}
    assert definitions.resources == {}
    assert "Ignoring 'functions' section" in caplog.text
    assert "Ignoring 'resources.Resources' section" in caplog.text


def test_non_mapping_list_entries_are_skipped(caplog):
    content = """
service: shop
functions:
  - just-a-string
  - ping:
      handler: handler.ping
"""
    with caplog.at_level(logging.ERROR):
        definitions = parse_service_definitions(content)

    assert list(definitions.functions) == ["ping"]
    assert "Ignoring entry 0 of 'functions'" in caplog.text


def test_cloudformation_substitutions_are_left_alone(caplog):
    with caplog.at_level(logging.WARNING):
        definitions = parse_service_definitions(SERVERLESS_YML, stage="dev")

    dlq_name = definitions.resources["DeadLetterQueue"]["Properties"]["QueueName"]
    assert dlq_name == {"Fn::Sub": "${AWS::StackName}-dlq"}
    assert "Unable to resolve variable" not in caplog.text
