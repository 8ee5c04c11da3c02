from django.contrib import admin

from ticketing.models import Event, Ticket


class TicketInline(admin.TabularInline):
    model = Ticket
    extra = 0
    can_delete = False
    fields = ["id", "user_id", "status", "reserved_at", "paid_at", "price"]
    readonly_fields = fields


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "date", "status", "capacity", "tickets_sold", "created_at"]
    list_filter = ["status"]
    search_fields = ["title", "location"]
    readonly_fields = ["tickets_sold", "created_at", "updated_at"]
    inlines = [TicketInline]

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Ticket)
class TicketAdmin(admin.ModelAdmin):
    list_display = ["id", "event", "user_id", "status", "reserved_at", "price"]
    list_filter = ["status", "event"]
    readonly_fields = ["event", "price", "reserved_at", "created_at"]

    def has_delete_permission(self, request, obj=None):
        return False
