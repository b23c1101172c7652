# Generated migration for the ingest checkpoint and transaction log

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='CheckpointState',
            fields=[
                ('key', models.CharField(max_length=100, primary_key=True, serialize=False)),
                ('last_processed_round', models.DecimalField(decimal_places=0, default=0, max_digits=20)),
                ('txn_count', models.DecimalField(decimal_places=0, default=0, max_digits=20)),
                ('total_amount', models.DecimalField(decimal_places=0, default=0, max_digits=30)),
                ('min_amount', models.DecimalField(decimal_places=0, default=0, max_digits=20)),
                ('min_amount_round', models.DecimalField(decimal_places=0, default=0, max_digits=20)),
                ('max_amount', models.DecimalField(decimal_places=0, default=0, max_digits=20)),
                ('max_amount_round', models.DecimalField(decimal_places=0, default=0, max_digits=20)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Checkpoint',
                'verbose_name_plural': 'Checkpoints',
            },
        ),
        migrations.CreateModel(
            name='LoggedTransaction',
            fields=[
                ('id', models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('signature', models.CharField(max_length=128, unique=True)),
                ('kind', models.CharField(db_index=True, max_length=32)),
                ('sender', models.DecimalField(db_index=True, decimal_places=0, max_digits=20)),
                ('recipient', models.DecimalField(db_index=True, decimal_places=0, max_digits=20)),
                ('amount', models.DecimalField(decimal_places=0, max_digits=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Logged Transaction',
                'verbose_name_plural': 'Logged Transactions',
                'ordering': ['-created_at', '-id'],
            },
        ),
    ]
