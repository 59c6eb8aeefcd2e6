"""
Client address helpers for requests arriving directly or through nginx/Cloudflare.
"""


def get_client_ip(request_meta):
    """
    Return the best guess of the client IP from ``request.META``.

    Order: first hop of X-Forwarded-For, then CF-Connecting-IP, then REMOTE_ADDR.
    """
    x_forwarded_for = request_meta.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
        if ip:
            return ip

    cf_connecting_ip = request_meta.get('HTTP_CF_CONNECTING_IP')
    if cf_connecting_ip:
        return cf_connecting_ip.strip()

    return (request_meta.get('REMOTE_ADDR') or '').strip()


def get_user_agent(request_meta):
    return request_meta.get('HTTP_USER_AGENT', '')[:500]
