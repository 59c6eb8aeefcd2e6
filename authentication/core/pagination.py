from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

from .response import standardized_response


class StandardPagination(PageNumberPagination):
    """
    ``?page=&limit=`` pagination. The page state is reported inside the
    standard envelope as ``{total, page, limit, total_pages}``.
    """
    page_size = 20
    page_size_query_param = 'limit'
    max_page_size = 100

    def get_page_number(self, request, paginator):
        # Malformed or out of range pages are clamped rather than 404ing.
        page_number = request.query_params.get(self.page_query_param) or 1
        if page_number in self.last_page_strings:
            return paginator.num_pages
        try:
            page_number = int(page_number)
        except (TypeError, ValueError):
            return 1
        return min(max(page_number, 1), paginator.num_pages)

    def get_pagination(self):
        paginator = self.page.paginator
        return {
            'total': paginator.count,
            'page': self.page.number,
            'limit': paginator.per_page,
            'total_pages': paginator.num_pages if paginator.count else 0,
        }

    def get_paginated_response(self, data, key='results', **extra):
        return Response(standardized_response(data={
            key: data,
            'pagination': self.get_pagination(),
            **extra,
        }))
