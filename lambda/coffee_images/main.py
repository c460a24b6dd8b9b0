import boto3
import json
import os
import re
import uuid
from typing import Any, Dict
from urllib.parse import quote
from botocore.config import Config
from botocore.exceptions import ClientError

# --- Environment Configuration ---
BUCKET_NAME = os.environ.get('BUCKET_NAME')
CLOUDFRONT_DOMAIN = os.environ.get('CLOUDFRONT_DOMAIN')
IMAGES_PREFIX = os.environ.get('IMAGES_PREFIX', 'images')

# Presigned upload URLs stay valid for 5 minutes
UPLOAD_URL_TTL = 300

# Only plain image file names are accepted for uploads
FILE_NAME_PATTERN = re.compile(r'^[\w\-. ]+\.(jpe?g|png|gif|webp)$', re.IGNORECASE)

# Initialize S3 Client outside the handler for connection re-use.
# SigV4 on the regional virtual-hosted endpoint: browsers PUT straight to it.
s3 = boto3.client(
    's3',
    region_name=os.environ.get('AWS_REGION'),
    config=Config(signature_version='s3v4', s3={'addressing_style': 'virtual'})
)

def _response(status_code: int, body: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": {
            "Content-Type": "application/json",
            "Access-Control-Allow-Origin": "*"
        },
        "body": json.dumps(body)
    }

def image_url(key: str) -> str:
    return f"https://{CLOUDFRONT_DOMAIN}/{quote(key)}"

def list_images() -> Dict[str, Any]:
    """
    Lists every object under the images prefix, following pagination.
    """
    images = []
    paginator = s3.get_paginator('list_objects_v2')
    for page in paginator.paginate(Bucket=BUCKET_NAME, Prefix=f"{IMAGES_PREFIX}/"):
        for obj in page.get('Contents', []):
            key = obj['Key']
            if key.endswith('/'):
                continue
            images.append({"key": key, "url": image_url(key)})

    return _response(200, {"images": images})

def create_upload_url(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Issues a presigned PUT URL so the browser uploads the image straight to S3.
    A random key prefix keeps uploads with the same file name apart.
    """
    try:
        payload = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        return _response(400, {"message": "Request body must be valid JSON"})

    file_name = payload.get('fileName') if isinstance(payload, dict) else None
    if not isinstance(file_name, str) or not FILE_NAME_PATTERN.match(file_name):
        return _response(400, {"message": "A valid image 'fileName' is required"})

    key = f"{IMAGES_PREFIX}/{uuid.uuid4().hex}-{file_name}"
    upload_url = s3.generate_presigned_url(
        'put_object',
        Params={'Bucket': BUCKET_NAME, 'Key': key},
        ExpiresIn=UPLOAD_URL_TTL
    )

    return _response(200, {"uploadUrl": upload_url, "key": key, "url": image_url(key)})

def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Entry point for the Coffee Images API (API Gateway proxy integration).
    GET  /images -> list uploaded coffee images with their CloudFront URLs.
    POST /images -> presigned upload URL for a new image.
    """
    method = event.get('httpMethod', '')

    try:
        if method == 'GET':
            return list_images()
        if method == 'POST':
            return create_upload_url(event)
    except ClientError as e:
        print(f"S3 Error: {e.response['Error']['Message']}")
        return _response(500, {"message": "Could not reach image storage"})

    print(f"Unsupported method: {method}")
    return _response(405, {"message": f"Method {method} not allowed"})
