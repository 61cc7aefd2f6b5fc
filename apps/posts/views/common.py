# apps/posts/views/common.py

from apps.core.pagination import ConfigurablePagination
from apps.posts.services.reactions import user_reactions_for


def paginate_with_user_reactions(request, queryset, serializer_class, *, results_key, target_kind, page_size):
    """
    Page a queryset and annotate each entry with the requester's own
    reaction, fetched in one ledger query for the whole page.
    """
    paginator = ConfigurablePagination(page_size=page_size, max_page_size=100, results_key=results_key)
    page = paginator.paginate_queryset(queryset, request)
    reactions = user_reactions_for(request.user, target_kind, [obj.pk for obj in page])
    data = serializer_class(
        page, many=True, context={"request": request, "user_reactions": reactions}
    ).data
    return paginator.get_paginated_response(data)
