from django.db import migrations, models
from django.conf import settings


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='ReportFieldMetadata',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('data_source', models.CharField(choices=[('transactions', 'المعاملات المالية'), ('payables', 'الذمم الدائنة'), ('receivables', 'الذمم المدينة'), ('inventory', 'المخزون'), ('salaries', 'الرواتب'), ('branches', 'الفروع')], max_length=30, verbose_name='Data source')),
                ('field_name', models.CharField(max_length=100, verbose_name='Field name')),
                ('display_name', models.CharField(max_length=200, verbose_name='Display name')),
                ('data_type', models.CharField(choices=[('string', 'String'), ('number', 'Number'), ('date', 'Date'), ('boolean', 'Boolean'), ('enum', 'Enum')], default='string', max_length=20)),
                ('filterable', models.BooleanField(default=True)),
                ('sortable', models.BooleanField(default=True)),
                ('aggregatable', models.BooleanField(default=False)),
                ('groupable', models.BooleanField(default=False)),
                ('default_visible', models.BooleanField(default=True)),
                ('default_order', models.IntegerField(default=0)),
                ('category', models.CharField(blank=True, default='', max_length=100)),
                ('description', models.TextField(blank=True, default='')),
                ('format', models.CharField(blank=True, default='', max_length=20)),
                ('enum_values', models.JSONField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Report field',
                'verbose_name_plural': 'Report fields',
                'ordering': ['data_source', 'default_order', 'display_name'],
            },
        ),
        migrations.AddConstraint(
            model_name='reportfieldmetadata',
            constraint=models.UniqueConstraint(fields=('data_source', 'field_name'), name='smart_reports_unique_field_per_source'),
        ),
        migrations.CreateModel(
            name='ReportTemplate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, verbose_name='Name')),
                ('description', models.TextField(blank=True, verbose_name='Description')),
                ('report_type', models.CharField(choices=[('FINANCIAL', 'Financial'), ('DEBTS', 'Debts'), ('INVENTORY', 'Inventory'), ('SALARY', 'Salary'), ('BRANCHES', 'Branches'), ('CUSTOM', 'Custom')], default='CUSTOM', max_length=20, verbose_name='Report type')),
                ('config', models.JSONField(default=dict, help_text='Report configuration {dataSource, fields, filters, ...}.', verbose_name='Configuration')),
                ('is_public', models.BooleanField(default=False, help_text='If true, every user can see and run this template', verbose_name='Public')),
                ('is_default', models.BooleanField(default=False, verbose_name='Default')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('deleted_at', models.DateTimeField(blank=True, db_index=True, null=True)),
                ('created_by', models.ForeignKey(on_delete=models.deletion.CASCADE, related_name='report_templates', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Report template',
                'verbose_name_plural': 'Report templates',
                'ordering': ['-is_default', '-updated_at'],
            },
        ),
        migrations.AddIndex(
            model_name='reporttemplate',
            index=models.Index(fields=['report_type', 'is_default'], name='smart_reports_tpl_type_def'),
        ),
        migrations.AddConstraint(
            model_name='reporttemplate',
            constraint=models.UniqueConstraint(condition=models.Q(('deleted_at__isnull', True), ('is_default', True)), fields=('report_type',), name='smart_reports_one_default_per_type'),
        ),
        migrations.CreateModel(
            name='ReportExecution',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('data_source', models.CharField(blank=True, max_length=30, verbose_name='Data source')),
                ('config', models.JSONField(default=dict, verbose_name='Configuration snapshot')),
                ('applied_filters', models.JSONField(default=list, verbose_name='Applied filters')),
                ('result_count', models.PositiveIntegerField(default=0)),
                ('execution_time_ms', models.FloatField(default=0.0)),
                ('export_format', models.CharField(blank=True, default='', max_length=20)),
                ('file_size_bytes', models.PositiveBigIntegerField(blank=True, null=True)),
                ('executor_role', models.CharField(blank=True, default='', max_length=30)),
                ('executor_branch', models.CharField(blank=True, default='', max_length=64)),
                ('executed_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('executed_by', models.ForeignKey(null=True, on_delete=models.deletion.SET_NULL, related_name='report_executions', to=settings.AUTH_USER_MODEL)),
                ('template', models.ForeignKey(blank=True, null=True, on_delete=models.deletion.SET_NULL, related_name='executions', to='smart_reports.reporttemplate')),
            ],
            options={
                'verbose_name': 'Report execution',
                'verbose_name_plural': 'Report executions',
                'ordering': ['-executed_at'],
            },
        ),
        migrations.AddIndex(
            model_name='reportexecution',
            index=models.Index(fields=['executed_by', 'executed_at'], name='smart_reports_exec_user_at'),
        ),
    ]
