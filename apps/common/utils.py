"""
Common utility functions for API responses
"""
from django.core.paginator import EmptyPage, Paginator
from rest_framework import status
from rest_framework.response import Response


def success_response(data=None, message="Success", status_code=status.HTTP_200_OK):
    """
    Standard success response format
    """
    response_data = {
        "code": 200,
        "msg": message,
        "data": data
    }
    return Response(response_data, status=status_code)


def error_response(message="Error", errors=None, status_code=status.HTTP_400_BAD_REQUEST):
    """
    Standard error response format
    """
    response_data = {
        "code": status_code,
        "msg": message
    }
    if errors:
        response_data["errors"] = errors
    return Response(response_data, status=status_code)


def parse_page_params(request, default_size=20, max_size=100):
    """Read pageNum/pageSize (or page/page_size) from the query string"""
    def _read(names, default):
        for name in names:
            raw = request.query_params.get(name)
            if raw:
                try:
                    return max(int(raw), 1)
                except (TypeError, ValueError):
                    return default
        return default

    page_num = _read(('pageNum', 'page'), 1)
    page_size = min(_read(('pageSize', 'page_size'), default_size), max_size)
    return page_num, page_size


def paginated_response(items, serializer_class, request, message="Success", context=None):
    """
    Standard paginated response format
    """
    page_num, page_size = parse_page_params(request)
    paginator = Paginator(items, page_size)
    try:
        page = paginator.page(page_num)
        page_items = page.object_list
    except EmptyPage:
        page_items = []

    serializer = serializer_class(page_items, many=True, context=context or {'request': request})
    return success_response({
        "list": serializer.data,
        "page": {
            "pageNum": page_num,
            "pageSize": page_size,
            "total": paginator.count,
            "totalPages": paginator.num_pages,
        }
    }, message)
