from channels.routing import URLRouter
from channels.testing import WebsocketCommunicator
from django.contrib.auth import get_user_model
from django.db import DatabaseError
from django.test import TransactionTestCase, SimpleTestCase, override_settings
from rest_framework.exceptions import NotFound
from rest_framework_simplejwt.tokens import AccessToken

from apps.core.api_exceptions import AuthorizationError, ValidationError
from apps.core.exceptions import custom_exception_handler
from apps.core.websocket.middleware import JWTAuthMiddlewareStack
from apps.core.websocket.routing import websocket_urlpatterns
from services.realtime_hub import reset_hub

CustomUser = get_user_model()


class ExceptionHandlerTests(SimpleTestCase):

    def test_domain_errors_are_normalized(self):
        response = custom_exception_handler(ValidationError("Group name is required"), {})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['message'], 'Group name is required')

        response = custom_exception_handler(AuthorizationError("Only the group creator can rename the group"), {})
        self.assertEqual(response.status_code, 403)

        response = custom_exception_handler(NotFound("Post not found"), {})
        self.assertEqual(response.data['message'], 'Post not found')

    @override_settings(DEBUG=False)
    def test_store_failure_hides_detail_in_production(self):
        response = custom_exception_handler(DatabaseError("disk full"), {})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data, {'message': 'Internal Server Error', 'error': None})

    @override_settings(DEBUG=True)
    def test_unexpected_error_detail_in_debug(self):
        response = custom_exception_handler(RuntimeError("boom"), {})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data['error'], 'boom')


class JWTWebSocketMiddlewareTests(TransactionTestCase):
    def setUp(self):
        reset_hub()
        self.application = JWTAuthMiddlewareStack(URLRouter(websocket_urlpatterns))
        self.user = CustomUser.objects.create_user(email='alice@example.com', full_name='Alice', password='password123')

    async def test_valid_token_authenticates(self):
        token = str(AccessToken.for_user(self.user))
        communicator = WebsocketCommunicator(self.application, f'/ws/?token={token}')
        connected, _ = await communicator.connect()
        self.assertTrue(connected)
        hello = await communicator.receive_json_from()
        self.assertEqual(hello['user_id'], self.user.id)
        await communicator.disconnect()

    async def test_missing_token_is_anonymous(self):
        communicator = WebsocketCommunicator(self.application, '/ws/')
        connected, _ = await communicator.connect()
        self.assertTrue(connected)
        hello = await communicator.receive_json_from()
        self.assertIsNone(hello['user_id'])
        await communicator.disconnect()

    async def test_invalid_token_is_closed(self):
        communicator = WebsocketCommunicator(self.application, '/ws/?token=not-a-jwt')
        connected, _ = await communicator.connect()
        self.assertFalse(connected)
