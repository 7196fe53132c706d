import json

def get_header(event, key, default=None):
    headers = event.get('headers') or {}
    if key in headers:
        return headers[key]
    # API Gateway may lowercase header names
    lowered = key.lower()
    for name, value in headers.items():
        if name.lower() == lowered:
            return value
    return default

def get_path_param(event, key, default=None):
    return (event.get('pathParameters') or {}).get(key, default)

def get_body(event, default=None):
    body = event.get('body')
    if body:
        try:
            return json.loads(body)
        except (json.JSONDecodeError, TypeError):
            return default
    return default

def get_body_param(event, key, default=None):
    body = get_body(event, {})
    if not isinstance(body, dict):
        return default
    return body.get(key, default)

def get_authorizer_claims(event):
    context = (event.get('requestContext') or {}).get('authorizer') or {}
    return context.get('claims') or {}
