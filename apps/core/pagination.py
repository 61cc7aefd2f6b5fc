from django.core.paginator import InvalidPage
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class ConfigurablePagination(PageNumberPagination):
    """
    A general-purpose pagination class that allows
    page_size and max_page_size to be set dynamically.

    Pages past the end come back empty instead of raising 404,
    and the envelope carries the list under `results_key`:

        {<results_key>: [...], currentPage, totalPages,
         total<ResultsKey>, hasNextPage, hasPrevPage}
    """
    page_size = 20
    page_size_query_param = 'limit'
    max_page_size = 100
    results_key = 'results'

    def __init__(self, page_size=None, max_page_size=None, results_key=None):
        if page_size is not None:
            self.page_size = page_size
        if max_page_size is not None:
            self.max_page_size = max_page_size
        if results_key is not None:
            self.results_key = results_key

    def paginate_queryset(self, queryset, request, view=None):
        self.request = request
        page_size = self.get_page_size(request)
        paginator = self.django_paginator_class(queryset, page_size)
        self.total_count = paginator.count
        self.total_pages = paginator.num_pages if self.total_count else 0

        try:
            self.current_page = max(int(request.query_params.get(self.page_query_param, 1)), 1)
        except (TypeError, ValueError):
            self.current_page = 1

        try:
            self.page = paginator.page(self.current_page)
        except InvalidPage:
            self.page = None
            return []
        return list(self.page)

    def get_paginated_response(self, data):
        suffix = self.results_key[:1].upper() + self.results_key[1:]
        return Response({
            self.results_key: data,
            'currentPage': self.current_page,
            'totalPages': self.total_pages,
            f'total{suffix}': self.total_count,
            'hasNextPage': self.current_page < self.total_pages,
            'hasPrevPage': self.current_page > 1,
        })
