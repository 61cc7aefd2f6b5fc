from django.urls import path

from apps.accounts.views import SignupView, ProfileView, ActiveUsersCountView


urlpatterns = [
    path('signup/', SignupView.as_view(), name='signup'),
    path('me/', ProfileView.as_view(), name='profile'),
    path('active-count/', ActiveUsersCountView.as_view(), name='active-users-count'),
]
