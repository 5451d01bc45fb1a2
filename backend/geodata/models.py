from django.db import models


class Polygon(models.Model):
    """
    A user-drawn shape.
    Stored as the ordered [lat, lng] pairs the client sent; order is the boundary order.
    """
    coordinates = models.JSONField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"Polygon #{self.id} ({len(self.coordinates)} points)"
