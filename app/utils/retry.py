# app/utils/retry.py
from redis import exceptions as redis_exc
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type


def redis_retry():
    #tylko bledy polaczenia, ResponseError itp. od razu w gore
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type((redis_exc.ConnectionError, redis_exc.TimeoutError)),
    )
