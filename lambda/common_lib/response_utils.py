import json
from decimal import Decimal

response_headers = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,X-Amz-Date,Authorization,X-Api-Key,X-Amz-Security-Token",
    "Access-Control-Allow-Methods": "OPTIONS,GET,POST,PUT,DELETE"
}

def convert_decimal(obj):
    """Convert Decimal objects to int or float for JSON serialization"""
    if isinstance(obj, list):
        return [convert_decimal(i) for i in obj]
    elif isinstance(obj, dict):
        return {k: convert_decimal(v) for k, v in obj.items()}
    elif isinstance(obj, Decimal):
        if obj % 1 == 0:
            return int(obj)
        return float(obj)
    return obj

def safe_json_dumps(data):
    """Serialize data to JSON, rendering store Decimals as plain numbers"""
    return json.dumps(convert_decimal(data), default=str)

def build_response(data, status_code):
    return {
        "statusCode": status_code,
        "headers": response_headers,
        "body": safe_json_dumps(data)
    }

def error_response(message, status_code=400):
    print(f"Error response: {message} (status: {status_code})")
    return build_response({"error": message}, status_code)

def success_response(data, status_code=200):
    return build_response(data, status_code)
