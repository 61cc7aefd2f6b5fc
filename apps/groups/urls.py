from django.urls import path

from .views import GroupViewSet


group_create = GroupViewSet.as_view({'post': 'create'})
group_sidebar = GroupViewSet.as_view({'get': 'list'})
group_messages = GroupViewSet.as_view({'get': 'messages'})
group_send = GroupViewSet.as_view({'post': 'send'})
group_add_user = GroupViewSet.as_view({'put': 'add_user'})
group_rename = GroupViewSet.as_view({'put': 'rename'})
group_leave = GroupViewSet.as_view({'delete': 'leave'})
group_remove_user = GroupViewSet.as_view({'delete': 'remove_user'})


app_name = 'groups'

urlpatterns = [
    path('', group_sidebar, name='group-sidebar'),
    path('gcreate/', group_create, name='group-create'),
    path('<int:group_id>/messages/', group_messages, name='group-messages'),
    path('<int:group_id>/send/', group_send, name='group-send'),
    path('<int:group_id>/addUser/', group_add_user, name='group-add-user'),
    path('<int:group_id>/rename/', group_rename, name='group-rename'),
    path('<int:group_id>/leave/', group_leave, name='group-leave'),
    path('<int:group_id>/removeUser/', group_remove_user, name='group-remove-user'),
]
