# apps/core/storages.py
from storages.backends.s3boto3 import S3Boto3Storage


# Public storage for user uploaded images (posts, comments, group messages)
class PublicMediaStorage(S3Boto3Storage):
    location = "media"
    default_acl = "public-read"
    querystring_auth = False
    file_overwrite = False
