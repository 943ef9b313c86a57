"""URL building utilities for short links."""


def build_short_url(
    code: str,
    base_domain: str,
    path_prefix: str = "",
) -> str:
    """Build complete short URL.
    
    Args:
        code: The short code
        base_domain: Base URL (e.g., https://lnk.sh)
        path_prefix: Optional path prefix (e.g., /s)
        
    Returns:
        Complete short URL
    """
    base = base_domain.rstrip("/")
    prefix = path_prefix.strip("/")
    
    if prefix:
        return f"{base}/{prefix}/{code}"
    return f"{base}/{code}"
