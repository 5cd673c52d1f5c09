from fastapi import Request


def get_client_ip(request: Request) -> str:
    """Best guess at the poster's address: proxy headers first, then the socket peer."""
    forwarded = request.headers.get('X-Forwarded-For', '')
    ip = (
        (forwarded.split(',')[0].strip() if forwarded else '')
        or request.headers.get('X-Real-IP', '').strip()
        or (request.client.host if request.client else '')
        or 'unknown'
    )
    return ip[:45]


def format_file_size(file_size: int) -> str:
    if not file_size:
        return ''
    if file_size < 1024:
        return f'{file_size} B'
    if file_size < 1024 * 1024:
        return f'{file_size / 1024:.1f} KB'
    if file_size < 1024 * 1024 * 1024:
        return f'{file_size / (1024 * 1024):.1f} MB'
    return f'{file_size / (1024 * 1024 * 1024):.1f} GB'
