from datetime import datetime, timezone


def make_log_tag(file, method, **kwargs):
    """[file][method][key:value]... prefix used on every log line of a publish pass."""
    log_tag = f"[{file}][{method}]"
    for key, value in kwargs.items():
        log_tag += f"[{key}:{value}]"
    return log_tag


def utc_now():
    return datetime.now(timezone.utc)


def truncate(text, limit=1500):
    s = "" if text is None else str(text)
    if len(s) <= limit:
        return s
    return s[:limit] + "..."
