# wallets/admin.py

from django.contrib import admin

from wallets.models import Wallet, WalletTransaction


# ======================================================
# WALLET ADMIN (READ-ONLY; use the grant endpoint to move money)
# ======================================================


class WalletTransactionInline(admin.TabularInline):
    model = WalletTransaction
    extra = 0
    can_delete = False
    fields = ("created_at", "type", "amount_cents", "description")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Wallet)
class WalletAdmin(admin.ModelAdmin):
    list_display = ("customer_id", "balance_cents", "created_at", "updated_at")
    readonly_fields = ("customer_id", "balance_cents", "created_at", "updated_at")
    search_fields = ("customer_id",)
    inlines = [WalletTransactionInline]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(WalletTransaction)
class WalletTransactionAdmin(admin.ModelAdmin):
    list_display = ("wallet", "type", "amount_cents", "description", "created_at")
    readonly_fields = ("wallet", "type", "amount_cents", "description", "created_at")
    search_fields = ("wallet__customer_id", "description")
    list_filter = ("type", "created_at")

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
