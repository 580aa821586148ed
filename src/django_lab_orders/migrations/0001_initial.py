# Generated manually for standalone django-lab-orders package

import django.db.models.deletion
import django.utils.timezone
from decimal import Decimal

from django.conf import settings
from django.db import migrations, models


def money(**kwargs):
    return models.DecimalField(decimal_places=4, max_digits=19, **kwargs)


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Department",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100, unique=True)),
            ],
            options={"ordering": ["name"]},
        ),
        migrations.CreateModel(
            name="Doctor",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=200)),
                ("clinic_name", models.CharField(blank=True, default="", max_length=200)),
                ("mobile", models.CharField(blank=True, default="", max_length=30)),
                (
                    "commission_percentage",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0"),
                        help_text="Commission rate in percent of the order total",
                        max_digits=7,
                    ),
                ),
                ("active", models.BooleanField(default=True)),
            ],
            options={"ordering": ["name"]},
        ),
        migrations.CreateModel(
            name="InventoryItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=200, unique=True)),
                ("current_stock", money(blank=True, default=Decimal("0"), null=True)),
                ("unit", models.CharField(blank=True, default="", help_text="pcs, ml, strips, ...", max_length=30)),
                ("min_threshold", money(default=Decimal("0"), help_text="Low stock alert level")),
                ("average_cost", money(default=Decimal("0"), help_text="Weighted-average purchase cost per unit")),
                ("active", models.BooleanField(default=True)),
            ],
            options={"ordering": ["name"]},
        ),
        migrations.AddConstraint(
            model_name="inventoryitem",
            constraint=models.CheckConstraint(
                condition=models.Q(("current_stock__isnull", True), ("current_stock__gte", 0), _connector="OR"),
                name="lab_inventory_stock_non_negative",
            ),
        ),
        migrations.CreateModel(
            name="LabOrderSettings",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "cancellation_key_hash",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Password hash of the order cancellation approval key",
                        max_length=255,
                    ),
                ),
            ],
            options={
                "verbose_name": "Lab Order Settings",
                "verbose_name_plural": "Lab Order Settings",
            },
        ),
        migrations.CreateModel(
            name="Patient",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("mrn", models.CharField(help_text="Medical record number", max_length=50, unique=True)),
                ("full_name", models.CharField(max_length=200)),
                (
                    "age",
                    models.PositiveIntegerField(
                        blank=True,
                        help_text="Age in whole years, used to select reference ranges",
                        null=True,
                    ),
                ),
                (
                    "gender",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Male / Female, used to select reference ranges",
                        max_length=20,
                    ),
                ),
                ("mobile_number", models.CharField(blank=True, default="", max_length=30)),
            ],
            options={"ordering": ["full_name"]},
        ),
        migrations.CreateModel(
            name="Payment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "payment_type",
                    models.CharField(
                        choices=[("INCOME", "Income"), ("EXPENSE", "Expense"), ("ADJUSTMENT", "Adjustment")],
                        db_index=True,
                        max_length=20,
                    ),
                ),
                ("category", models.CharField(help_text="RENT, SALARY, UTILITIES, MISC, REFUND, ...", max_length=50)),
                ("description", models.CharField(max_length=255)),
                ("amount", money()),
                (
                    "method",
                    models.CharField(
                        choices=[("CASH", "Cash"), ("BANK_TRANSFER", "Bank transfer"), ("CHEQUE", "Cheque")],
                        default="CASH",
                        max_length=20,
                    ),
                ),
                (
                    "reference_number",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Bank transaction id or cheque number",
                        max_length=100,
                    ),
                ),
                ("remarks", models.TextField(blank=True, default="")),
                ("transaction_date", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "recorded_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={"ordering": ["-transaction_date", "-id"]},
        ),
        migrations.AddConstraint(
            model_name="payment",
            constraint=models.CheckConstraint(
                condition=models.Q(("amount__gt", 0)),
                name="lab_payment_amount_positive",
            ),
        ),
        migrations.CreateModel(
            name="TestDefinition",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=200)),
                ("short_code", models.CharField(blank=True, default="", max_length=30)),
                ("unit", models.CharField(blank=True, default="", max_length=30)),
                (
                    "min_range",
                    money(blank=True, help_text="Default lower bound when the test has no reference ranges", null=True),
                ),
                (
                    "max_range",
                    money(blank=True, help_text="Default upper bound when the test has no reference ranges", null=True),
                ),
                ("price", money(blank=True, help_text="Individual price; null until the test is priced", null=True)),
                ("active", models.BooleanField(default=True)),
                (
                    "department",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="tests",
                        to="django_lab_orders.department",
                    ),
                ),
            ],
            options={"ordering": ["name"]},
        ),
        migrations.CreateModel(
            name="ReferenceRange",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "gender",
                    models.CharField(
                        choices=[("Male", "Male"), ("Female", "Female"), ("Both", "Both")],
                        default="Both",
                        max_length=10,
                    ),
                ),
                ("min_age", models.PositiveIntegerField(blank=True, null=True)),
                ("max_age", models.PositiveIntegerField(blank=True, null=True)),
                ("min_val", money(blank=True, null=True)),
                ("max_val", money(blank=True, null=True)),
                (
                    "test",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="ranges",
                        to="django_lab_orders.testdefinition",
                    ),
                ),
            ],
            options={"ordering": ["id"]},
        ),
        migrations.CreateModel(
            name="Panel",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=200)),
                (
                    "price",
                    money(blank=True, help_text="Flat price; supersedes member test prices when set", null=True),
                ),
                ("active", models.BooleanField(default=True)),
                (
                    "department",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="panels",
                        to="django_lab_orders.department",
                    ),
                ),
                (
                    "tests",
                    models.ManyToManyField(blank=True, related_name="panels", to="django_lab_orders.testdefinition"),
                ),
            ],
            options={"ordering": ["name"]},
        ),
        migrations.CreateModel(
            name="ConsumptionRecipe",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", money()),
                (
                    "item",
                    models.ForeignKey(
                        help_text="Inventory rows cannot be deleted while a recipe references them",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="recipes",
                        to="django_lab_orders.inventoryitem",
                    ),
                ),
                (
                    "test",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="recipe",
                        to="django_lab_orders.testdefinition",
                    ),
                ),
            ],
            options={"ordering": ["id"]},
        ),
        migrations.AddConstraint(
            model_name="consumptionrecipe",
            constraint=models.UniqueConstraint(fields=("test", "item"), name="lab_recipe_unique_test_item"),
        ),
        migrations.AddConstraint(
            model_name="consumptionrecipe",
            constraint=models.CheckConstraint(
                condition=models.Q(("quantity__gt", 0)),
                name="lab_recipe_quantity_positive",
            ),
        ),
        migrations.CreateModel(
            name="LabOrder",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("order_date", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "status",
                    models.CharField(
                        choices=[("PENDING", "Pending"), ("IN_PROGRESS", "In progress"), ("COMPLETED", "Completed")],
                        db_index=True,
                        default="PENDING",
                        max_length=20,
                    ),
                ),
                ("total_amount", money(default=Decimal("0"))),
                ("discount_amount", money(default=Decimal("0"))),
                ("paid_amount", money(default=Decimal("0"))),
                ("balance_due", money(default=Decimal("0"))),
                ("is_report_delivered", models.BooleanField(default=False)),
                ("delivery_date", models.DateTimeField(blank=True, null=True)),
                (
                    "lab_started_at",
                    models.DateTimeField(
                        blank=True,
                        help_text="First time lab staff recorded a result; blocks cancellation",
                        null=True,
                    ),
                ),
                ("results_edited", models.BooleanField(default=False)),
                ("results_edited_at", models.DateTimeField(blank=True, null=True)),
                ("results_edit_reason", models.TextField(blank=True, default="")),
                ("reprint_required", models.BooleanField(default=False)),
                ("reprint_count", models.PositiveIntegerField(default=0)),
                ("last_reprint_at", models.DateTimeField(blank=True, null=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "last_reprint_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                ("panels", models.ManyToManyField(blank=True, related_name="orders", to="django_lab_orders.panel")),
                (
                    "patient",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="orders",
                        to="django_lab_orders.patient",
                    ),
                ),
                (
                    "referring_doctor",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="orders",
                        to="django_lab_orders.doctor",
                    ),
                ),
                (
                    "results_edited_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={"ordering": ["-order_date", "-id"]},
        ),
        migrations.AddIndex(
            model_name="laborder",
            index=models.Index(fields=["status", "order_date"], name="lab_order_status_date_idx"),
        ),
        migrations.CreateModel(
            name="CommissionLedgerRow",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("total_bill_amount", money(help_text="Order total at the time the order was created")),
                (
                    "commission_percentage",
                    models.DecimalField(
                        decimal_places=4,
                        help_text="Doctor's rate at the time the order was created",
                        max_digits=7,
                    ),
                ),
                ("calculated_amount", money(default=Decimal("0"))),
                ("paid_amount", money(default=Decimal("0"))),
                (
                    "status",
                    models.CharField(
                        choices=[("UNPAID", "Unpaid"), ("PAID", "Paid")],
                        db_index=True,
                        default="UNPAID",
                        max_length=10,
                    ),
                ),
                ("transaction_date", models.DateField(default=django.utils.timezone.localdate)),
                ("payment_date", models.DateField(blank=True, null=True)),
                (
                    "doctor",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="commission_rows",
                        to="django_lab_orders.doctor",
                    ),
                ),
                (
                    "order",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="commission",
                        to="django_lab_orders.laborder",
                    ),
                ),
            ],
            options={"ordering": ["-transaction_date", "-id"]},
        ),
        migrations.CreateModel(
            name="LabResult",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "result_value",
                    models.TextField(
                        blank=True,
                        default="",
                        help_text="Free text; numeric values are checked against reference ranges",
                    ),
                ),
                ("is_abnormal", models.BooleanField(default=False)),
                (
                    "remarks",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="LOW / HIGH / Normal, blank when no range applies",
                        max_length=20,
                    ),
                ),
                ("performed_at", models.DateTimeField(blank=True, null=True)),
                (
                    "status",
                    models.CharField(
                        choices=[("PENDING", "Pending"), ("COMPLETED", "Completed")],
                        default="PENDING",
                        max_length=20,
                    ),
                ),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="results",
                        to="django_lab_orders.laborder",
                    ),
                ),
                (
                    "performed_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "test",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="results",
                        to="django_lab_orders.testdefinition",
                    ),
                ),
            ],
            options={"ordering": ["id"]},
        ),
        migrations.AddConstraint(
            model_name="labresult",
            constraint=models.UniqueConstraint(fields=("order", "test"), name="lab_result_unique_order_test"),
        ),
        migrations.CreateModel(
            name="LabResultEditAudit",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("test_name", models.CharField(max_length=200)),
                ("previous_value", models.TextField(blank=True, default="")),
                ("new_value", models.TextField(blank=True, default="")),
                ("previous_remarks", models.CharField(blank=True, default="", max_length=20)),
                ("new_remarks", models.CharField(blank=True, default="", max_length=20)),
                ("previous_abnormal", models.BooleanField(default=False)),
                ("new_abnormal", models.BooleanField(default=False)),
                ("edited_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("reason", models.TextField(blank=True, default="")),
                ("report_delivered_at_edit", models.BooleanField(default=False)),
                (
                    "edited_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="edit_audits",
                        to="django_lab_orders.laborder",
                    ),
                ),
                (
                    "result",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="edit_audits",
                        to="django_lab_orders.labresult",
                    ),
                ),
            ],
            options={"ordering": ["-edited_at", "-id"]},
        ),
    ]
