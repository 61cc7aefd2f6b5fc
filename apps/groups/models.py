from django.db import models
from django.conf import settings
from django.utils import timezone


# GROUP Model -------------------------------------------------------------------------
class Group(models.Model):
    id = models.BigAutoField(primary_key=True)
    name = models.CharField(max_length=50, verbose_name="Group Name")
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="created_groups", verbose_name="Created By")
    members = models.ManyToManyField(settings.AUTH_USER_MODEL, through="GroupMembership", related_name="chat_groups", verbose_name="Members")
    created_at = models.DateTimeField(default=timezone.now, verbose_name="Created At")
    updated_at = models.DateTimeField(auto_now=True, verbose_name="Updated At")

    class Meta:
        verbose_name = "Group"
        verbose_name_plural = "Groups"
        ordering = ["-created_at"]

    def has_member(self, user_id) -> bool:
        return self.memberships.filter(user_id=user_id).exists()

    def __str__(self):
        return f"Group: {self.name}"


# GROUP MEMBERSHIP Model --------------------------------------------------------------
class GroupMembership(models.Model):
    id = models.BigAutoField(primary_key=True)
    group = models.ForeignKey(Group, on_delete=models.CASCADE, related_name="memberships", verbose_name="Group")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="group_memberships", verbose_name="User")
    joined_at = models.DateTimeField(auto_now_add=True, verbose_name="Joined At")

    class Meta:
        unique_together = ("group", "user")

    def __str__(self):
        return f"{self.user_id} in {self.group_id}"


# GROUP MESSAGE Model -----------------------------------------------------------------
class GroupMessage(models.Model):
    id = models.BigAutoField(primary_key=True)
    group = models.ForeignKey(Group, on_delete=models.CASCADE, related_name="messages", verbose_name="Group")
    sender = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="sent_group_messages", verbose_name="Sender")
    text = models.TextField(blank=True, default="", verbose_name="Text")
    image = models.CharField(max_length=500, blank=True, null=True, verbose_name="Image")
    created_at = models.DateTimeField(default=timezone.now, verbose_name="Created At")

    class Meta:
        verbose_name = "Group Message"
        verbose_name_plural = "Group Messages"
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["group", "-created_at"], name="groups_grou_group_i_5e1c2a_idx"),
        ]

    def __str__(self):
        return f"Message {self.pk} in {self.group_id} from {self.sender_id}"
