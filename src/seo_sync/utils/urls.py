from __future__ import annotations


def root_url(domain: str) -> str:
    domain = domain.strip()
    if domain.startswith(("http://", "https://")):
        return domain
    return f"https://{domain}"
