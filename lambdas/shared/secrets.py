"""Model API key lookup."""

import os
from functools import lru_cache

import boto3
from aws_lambda_powertools import Logger

logger = Logger(child=True)

# SSM Parameter name for the Anthropic API key
MODEL_API_KEY_PARAM = "/sanctify/dev/secrets/anthropic_api_key"


@lru_cache(maxsize=1)
def get_model_api_key() -> str:
    """Retrieve the model API key.

    ANTHROPIC_API_KEY wins when set (local runs). Otherwise the key is
    read from SSM Parameter Store, named by MODEL_API_KEY_PARAM.
    Cached for the lifetime of the Lambda container.

    Returns:
        The API key string

    Raises:
        ClientError: If SSM parameter not found
    """
    api_key = os.environ.get("ANTHROPIC_API_KEY")
    if api_key:
        logger.info("Using model API key from environment")
        return api_key

    param_name = os.environ.get("MODEL_API_KEY_PARAM", MODEL_API_KEY_PARAM)

    client = boto3.client("ssm")
    response = client.get_parameter(Name=param_name, WithDecryption=True)
    logger.info("Retrieved model API key from SSM Parameter Store")
    return response["Parameter"]["Value"]
