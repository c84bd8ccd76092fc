from __future__ import annotations

import json
import urllib.error
import urllib.request
import uuid


def build_multipart_payload(
    *,
    file_field: str,
    file_name: str,
    file_bytes: bytes,
    file_content_type: str,
    fields: dict[str, str] | None = None,
) -> tuple[bytes, str]:
    boundary = f'----TableFormsBoundary{uuid.uuid4().hex}'
    chunks: list[bytes] = []

    for key, value in (fields or {}).items():
        chunks.append(f'--{boundary}\r\n'.encode('utf-8'))
        chunks.append(
            f'Content-Disposition: form-data; name="{key}"\r\n\r\n{value}\r\n'.encode('utf-8')
        )

    chunks.append(f'--{boundary}\r\n'.encode('utf-8'))
    chunks.append(
        (
            f'Content-Disposition: form-data; name="{file_field}"; '
            f'filename="{file_name}"\r\n'
            f'Content-Type: {file_content_type}\r\n\r\n'
        ).encode('utf-8')
    )
    chunks.append(file_bytes)
    chunks.append(b'\r\n')
    chunks.append(f'--{boundary}--\r\n'.encode('utf-8'))

    return b''.join(chunks), f'multipart/form-data; boundary={boundary}'


def request_json(
    url: str,
    *,
    method: str = 'GET',
    data: bytes | None = None,
    headers: dict[str, str] | None = None,
    timeout: int = 60,
) -> dict[str, object]:
    req = urllib.request.Request(url, data=data, method=method)
    for key, value in (headers or {}).items():
        req.add_header(key, value)

    with urllib.request.urlopen(req, timeout=timeout) as response:
        return json.loads(response.read().decode('utf-8'))


def http_error_detail(exc: urllib.error.HTTPError) -> str:
    """The API's ``detail`` message, falling back to the raw body."""
    body = exc.read().decode('utf-8', errors='replace')
    try:
        payload = json.loads(body)
    except ValueError:
        return body or f'HTTP {exc.code}'
    if isinstance(payload, dict) and payload.get('detail'):
        return str(payload['detail'])
    return body


def form_layout(row_count: int, header_count: int) -> str:
    # One wide row reads better as a single grid form than as a narrow card.
    if row_count == 1 and header_count > 4:
        return 'single'
    return 'cards'
