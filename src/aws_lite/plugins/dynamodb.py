"""DynamoDB hooks for operations with nested typed-attribute fields.

Each hook encodes only the parts of the payload DynamoDB expects in
typed-attribute form and sets ``awsjson: False`` so the engine does not
encode the whole payload a second time.
"""

from __future__ import annotations

import copy
from typing import Any

from aws_lite.catalog.descriptor import Hooks

_TRANSACT_WRITE_OPS = ("ConditionCheck", "Delete", "Put", "Update")
_TRANSACT_WRITE_FIELDS = ("ExpressionAttributeValues", "Key", "Item")


def _encode_parameters(statement: dict[str, Any], codecs: Any) -> dict[str, Any]:
    if statement.get("Parameters") is not None:
        statement["Parameters"] = [codecs.marshall_value(p) for p in statement["Parameters"]]
    return statement


def _batch_execute_request(params: dict[str, Any], codecs: Any) -> dict[str, Any]:
    payload = copy.deepcopy(params)
    payload["Statements"] = [
        _encode_parameters(s, codecs) for s in payload.get("Statements") or []
    ]
    return {"awsjson": False, "payload": payload}


def _batch_execute_response(response: dict[str, Any], codecs: Any) -> dict[str, Any]:
    for item in response.get("Responses") or []:
        error = item.get("Error") or {}
        if error.get("Item"):
            error["Item"] = codecs.unmarshall(error["Item"])
        if item.get("Item"):
            item["Item"] = codecs.unmarshall(item["Item"])
    return {"response": response}


def _batch_get_request(params: dict[str, Any], codecs: Any) -> dict[str, Any]:
    payload = copy.deepcopy(params)
    for request in (payload.get("RequestItems") or {}).values():
        if request.get("Keys") is not None:
            request["Keys"] = [codecs.marshall(key) for key in request["Keys"]]
        if request.get("ExpressionAttributeValues") is not None:
            request["ExpressionAttributeValues"] = codecs.marshall(
                request["ExpressionAttributeValues"]
            )
    return {"awsjson": False, "payload": payload}


def _batch_get_response(response: dict[str, Any], codecs: Any) -> dict[str, Any]:
    responses = response.get("Responses") or {}
    for table, items in responses.items():
        responses[table] = [codecs.unmarshall(item) for item in items or []]
    unprocessed = response.get("UnprocessedKeys") or {}
    for request in unprocessed.values():
        if request.get("Keys") is not None:
            request["Keys"] = [codecs.unmarshall(key) for key in request["Keys"]]
    return {"response": response}


def _convert_write_requests(
    requests: dict[str, list[dict[str, Any]]],
    convert: Any,
) -> dict[str, list[dict[str, Any]]]:
    converted: dict[str, list[dict[str, Any]]] = {}
    for table, items in requests.items():
        converted[table] = []
        for item in items or []:
            request: dict[str, Any] = {}
            if "DeleteRequest" in item:
                request["DeleteRequest"] = {"Key": convert(item["DeleteRequest"]["Key"])}
            if "PutRequest" in item:
                request["PutRequest"] = {"Item": convert(item["PutRequest"]["Item"])}
            converted[table].append(request)
    return converted


def _batch_write_request(params: dict[str, Any], codecs: Any) -> dict[str, Any]:
    payload = dict(params)
    payload["RequestItems"] = _convert_write_requests(
        params.get("RequestItems") or {}, codecs.marshall
    )
    return {"awsjson": False, "payload": payload}


def _batch_write_response(response: dict[str, Any], codecs: Any) -> dict[str, Any]:
    unprocessed = _convert_write_requests(
        response.get("UnprocessedItems") or {}, codecs.unmarshall
    )
    return {"response": {**response, "UnprocessedItems": unprocessed}}


def _execute_statement_request(params: dict[str, Any], codecs: Any) -> dict[str, Any]:
    payload = _encode_parameters(copy.deepcopy(params), codecs)
    return {"awsjson": False, "payload": payload}


def _items_response(response: dict[str, Any], codecs: Any) -> dict[str, Any]:
    if response.get("Items"):
        response["Items"] = [codecs.unmarshall(item) for item in response["Items"]]
    if response.get("LastEvaluatedKey"):
        response["LastEvaluatedKey"] = codecs.unmarshall(response["LastEvaluatedKey"])
    return {"response": response}


def _execute_transaction_request(params: dict[str, Any], codecs: Any) -> dict[str, Any]:
    payload = copy.deepcopy(params)
    payload["TransactStatements"] = [
        _encode_parameters(s, codecs) for s in payload.get("TransactStatements") or []
    ]
    return {"awsjson": False, "payload": payload}


def _item_list_response(response: dict[str, Any], codecs: Any) -> dict[str, Any]:
    for item in response.get("Responses") or []:
        if item.get("Item"):
            item["Item"] = codecs.unmarshall(item["Item"])
    return {"response": response}


def _transact_get_request(params: dict[str, Any], codecs: Any) -> dict[str, Any]:
    payload = copy.deepcopy(params)
    for item in payload.get("TransactItems") or []:
        get = item.get("Get") or {}
        if get.get("Key"):
            get["Key"] = codecs.marshall(get["Key"])
    return {"awsjson": False, "payload": payload}


def _transact_write_request(params: dict[str, Any], codecs: Any) -> dict[str, Any]:
    payload = copy.deepcopy(params)
    for item in payload.get("TransactItems") or []:
        # Exactly one of the four is expected; DynamoDB rejects anything else
        for op in _TRANSACT_WRITE_OPS:
            body = item.get(op)
            if not body:
                continue
            for field in _TRANSACT_WRITE_FIELDS:
                if body.get(field):
                    body[field] = codecs.marshall(body[field])
    return {"awsjson": False, "payload": payload}


def _transact_write_response(response: dict[str, Any], codecs: Any) -> dict[str, Any]:
    metrics = response.get("ItemCollectionMetrics") or {}
    for entries in metrics.values():
        for entry in entries or []:
            if entry.get("ItemCollectionKey"):
                entry["ItemCollectionKey"] = codecs.unmarshall(entry["ItemCollectionKey"])
    return {"response": response}


BatchExecuteStatement = Hooks(request=_batch_execute_request, response=_batch_execute_response)
BatchGetItem = Hooks(request=_batch_get_request, response=_batch_get_response)
BatchWriteItem = Hooks(request=_batch_write_request, response=_batch_write_response)
ExecuteStatement = Hooks(request=_execute_statement_request, response=_items_response)
ExecuteTransaction = Hooks(request=_execute_transaction_request, response=_item_list_response)
Query = Hooks(response=_items_response)
Scan = Hooks(response=_items_response)
TransactGetItems = Hooks(request=_transact_get_request, response=_item_list_response)
TransactWriteItems = Hooks(request=_transact_write_request, response=_transact_write_response)
