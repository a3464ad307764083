from rest_framework.pagination import PageNumberPagination


class StandardResultsSetPagination(PageNumberPagination):
    """
    Standard pagination for list endpoints.
    - page_size: 20 items per page by default
    - max_page_size: Maximum 100 items per page
    - page_size_query_param: Allows client to specify size with ?page_size=N
    """
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100
