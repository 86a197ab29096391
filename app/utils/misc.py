import datetime


def get_utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.UTC)


def get_epoch_ms() -> int:
    return int(get_utc_now().timestamp() * 1000)
