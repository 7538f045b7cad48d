from __future__ import annotations

from aws_lite.codecs import CODECS
from aws_lite.plugins import dynamodb


def test_batch_get_encodes_keys_and_values() -> None:
    params = {
        "RequestItems": {
            "t": {"Keys": [{"id": "1"}], "ExpressionAttributeValues": {":v": 1}},
        }
    }

    result = dynamodb.BatchGetItem.request(params, CODECS)

    assert result["awsjson"] is False
    table = result["payload"]["RequestItems"]["t"]
    assert table["Keys"] == [{"id": {"S": "1"}}]
    assert table["ExpressionAttributeValues"] == {":v": {"N": "1"}}
    assert params["RequestItems"]["t"]["Keys"] == [{"id": "1"}]


def test_batch_get_decodes_responses() -> None:
    response = {
        "Responses": {"t": [{"id": {"S": "1"}}]},
        "UnprocessedKeys": {"t": {"Keys": [{"id": {"S": "2"}}]}},
    }

    result = dynamodb.BatchGetItem.response(response, CODECS)["response"]

    assert result["Responses"] == {"t": [{"id": "1"}]}
    assert result["UnprocessedKeys"]["t"]["Keys"] == [{"id": "2"}]


def test_batch_write_round_trip() -> None:
    params = {
        "RequestItems": {
            "t": [
                {"PutRequest": {"Item": {"id": "1", "n": 2}}},
                {"DeleteRequest": {"Key": {"id": "3"}}},
            ]
        },
        "ReturnConsumedCapacity": "TOTAL",
    }

    payload = dynamodb.BatchWriteItem.request(params, CODECS)["payload"]

    assert payload["ReturnConsumedCapacity"] == "TOTAL"
    assert payload["RequestItems"]["t"] == [
        {"PutRequest": {"Item": {"id": {"S": "1"}, "n": {"N": "2"}}}},
        {"DeleteRequest": {"Key": {"id": {"S": "3"}}}},
    ]

    response = dynamodb.BatchWriteItem.response(
        {"UnprocessedItems": payload["RequestItems"]}, CODECS
    )["response"]
    assert response["UnprocessedItems"] == params["RequestItems"]


def test_statement_parameters_encoded() -> None:
    payload = dynamodb.ExecuteStatement.request(
        {"Statement": "SELECT * FROM t WHERE id=?", "Parameters": ["1", 2]}, CODECS
    )["payload"]

    assert payload["Parameters"] == [{"S": "1"}, {"N": "2"}]


def test_batch_execute_statement() -> None:
    payload = dynamodb.BatchExecuteStatement.request(
        {"Statements": [{"Statement": "s", "Parameters": [True]}, {"Statement": "t"}]},
        CODECS,
    )["payload"]

    assert payload["Statements"] == [
        {"Statement": "s", "Parameters": [{"BOOL": True}]},
        {"Statement": "t"},
    ]

    response = dynamodb.BatchExecuteStatement.response(
        {"Responses": [{"Item": {"id": {"S": "1"}}}, {"Error": {"Item": {"id": {"S": "2"}}}}]},
        CODECS,
    )["response"]
    assert response["Responses"] == [{"Item": {"id": "1"}}, {"Error": {"Item": {"id": "2"}}}]


def test_items_response_decodes_page_fields() -> None:
    response = dynamodb.Query.response(
        {"Items": [{"id": {"S": "1"}}], "LastEvaluatedKey": {"id": {"S": "1"}}, "Count": 1},
        CODECS,
    )["response"]

    assert response == {"Items": [{"id": "1"}], "LastEvaluatedKey": {"id": "1"}, "Count": 1}


def test_transact_write_encodes_each_action() -> None:
    params = {
        "TransactItems": [
            {"Put": {"TableName": "t", "Item": {"id": "1"}}},
            {
                "Update": {
                    "TableName": "t",
                    "Key": {"id": "2"},
                    "UpdateExpression": "SET n = :n",
                    "ExpressionAttributeValues": {":n": 5},
                }
            },
            {"ConditionCheck": {"TableName": "t", "Key": {"id": "3"}}},
        ]
    }

    items = dynamodb.TransactWriteItems.request(params, CODECS)["payload"]["TransactItems"]

    assert items[0]["Put"]["Item"] == {"id": {"S": "1"}}
    assert items[1]["Update"]["Key"] == {"id": {"S": "2"}}
    assert items[1]["Update"]["ExpressionAttributeValues"] == {":n": {"N": "5"}}
    assert items[1]["Update"]["UpdateExpression"] == "SET n = :n"
    assert items[2]["ConditionCheck"]["Key"] == {"id": {"S": "3"}}


def test_transact_write_response_decodes_collection_keys() -> None:
    response = dynamodb.TransactWriteItems.response(
        {"ItemCollectionMetrics": {"t": [{"ItemCollectionKey": {"pk": {"S": "a"}}}]}},
        CODECS,
    )["response"]

    assert response["ItemCollectionMetrics"]["t"][0]["ItemCollectionKey"] == {"pk": "a"}


def test_transact_get_round_trip() -> None:
    payload = dynamodb.TransactGetItems.request(
        {"TransactItems": [{"Get": {"TableName": "t", "Key": {"id": "1"}}}]}, CODECS
    )["payload"]
    assert payload["TransactItems"][0]["Get"]["Key"] == {"id": {"S": "1"}}

    response = dynamodb.TransactGetItems.response(
        {"Responses": [{"Item": {"id": {"S": "1"}}}, {}]}, CODECS
    )["response"]
    assert response["Responses"] == [{"Item": {"id": "1"}}, {}]
