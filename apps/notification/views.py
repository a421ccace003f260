# apps/notification/views.py
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import Notification


class NotificationListView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        notifications = Notification.objects.filter(user=request.user).order_by('-created_at')[:50]
        return Response([
            {
                "id": n.id,
                "event_type": n.event_type,
                "payload": n.payload,
                "read": n.read,
                "created_at": n.created_at,
            } for n in notifications
        ])


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def mark_notification_read(request, notification_id):
    try:
        notification = Notification.objects.get(id=notification_id, user=request.user)
    except Notification.DoesNotExist:
        return Response({"status": "not_found"}, status=404)

    notification.mark_read()
    return Response({"status": "success"})
