"""
Google reCAPTCHA verification for public forms
"""
import requests
import logging

from exceptions import ExternalServiceException

logger = logging.getLogger("main")


def verify_recaptcha(token, recaptcha_settings, remote_ip=None):
    """True when Google accepts `token`.

    Raises ExternalServiceException when the secret is missing or the
    verification endpoint cannot be reached.
    """
    secret = recaptcha_settings.get("secret_key")
    if not secret:
        logger.error("reCAPTCHA secret key is not configured")
        raise ExternalServiceException("reCAPTCHA", "Comment verification is not configured")

    payload = {"secret": secret, "response": token}
    if remote_ip:
        payload["remoteip"] = remote_ip

    try:
        response = requests.post(
            recaptcha_settings["verify_url"],
            data=payload,
            timeout=recaptcha_settings.get("timeout", 10)
        )
        response.raise_for_status()
        result = response.json()
    except (requests.RequestException, ValueError) as e:
        logger.error(f"reCAPTCHA verification error: {e}")
        raise ExternalServiceException("reCAPTCHA", "Could not verify reCAPTCHA")

    if not result.get("success"):
        logger.warning(f"reCAPTCHA rejected: {result.get('error-codes')}")
        return False
    return True
