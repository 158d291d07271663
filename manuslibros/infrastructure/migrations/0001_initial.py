import django.core.serializers.json
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='LivroModel',
            fields=[
                ('id', models.CharField(max_length=64, primary_key=True, serialize=False)),
                ('titulo', models.CharField(max_length=255, verbose_name='Título')),
                ('preco_custo', models.DecimalField(decimal_places=2, max_digits=12, verbose_name='Preço de Custo')),
                ('preco_venda', models.DecimalField(decimal_places=2, max_digits=12, verbose_name='Preço de Venda')),
                ('estoque', models.IntegerField(blank=True, null=True)),
                ('is_box', models.BooleanField(default=False, verbose_name='É Box')),
                ('itens', models.JSONField(blank=True, default=list, verbose_name='Componentes do Box')),
            ],
            options={
                'verbose_name': 'Livro',
                'verbose_name_plural': 'Livros',
                'db_table': 'books',
                'ordering': ['titulo'],
            },
        ),
        migrations.CreateModel(
            name='ContaModel',
            fields=[
                ('id', models.CharField(max_length=64, primary_key=True, serialize=False)),
                ('username', models.CharField(db_index=True, max_length=150)),
                ('senha', models.CharField(max_length=255)),
                ('papel', models.CharField(choices=[('ADMIN', 'Administrador'), ('SELLER', 'Vendedor')], default='ADMIN', max_length=10)),
                ('nome', models.CharField(max_length=255)),
                ('avatar', models.TextField(blank=True, null=True)),
            ],
            options={
                'verbose_name': 'Conta',
                'verbose_name_plural': 'Contas',
                'db_table': 'users',
            },
        ),
        migrations.CreateModel(
            name='VendedorModel',
            fields=[
                ('id', models.CharField(max_length=64, primary_key=True, serialize=False)),
                ('username', models.CharField(db_index=True, max_length=150)),
                ('senha', models.CharField(max_length=255)),
                ('papel', models.CharField(choices=[('ADMIN', 'Administrador'), ('SELLER', 'Vendedor')], default='SELLER', max_length=10)),
                ('nome', models.CharField(max_length=255)),
                ('email', models.CharField(blank=True, default='', max_length=255)),
                ('telefone', models.CharField(blank=True, default='', max_length=30)),
                ('conta_bancaria', models.TextField(blank=True, default='', verbose_name='Dados Bancários / PIX')),
                ('taxa_comissao', models.DecimalField(decimal_places=2, default=15, max_digits=5, verbose_name='Comissão (%)')),
                ('avatar', models.TextField(blank=True, null=True)),
            ],
            options={
                'verbose_name': 'Vendedor',
                'verbose_name_plural': 'Vendedores',
                'db_table': 'sellers',
                'ordering': ['nome'],
            },
        ),
        migrations.CreateModel(
            name='PedidoModel',
            fields=[
                ('id', models.CharField(max_length=64, primary_key=True, serialize=False)),
                ('data', models.DateTimeField(db_index=True, verbose_name='Data do Pedido')),
                ('cliente', models.JSONField(encoder=django.core.serializers.json.DjangoJSONEncoder)),
                ('itens', models.JSONField(default=list, encoder=django.core.serializers.json.DjangoJSONEncoder)),
                ('desconto', models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ('valor_frete', models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ('tipo_frete', models.CharField(choices=[('Simples', 'Simples'), ('SEDEX', 'SEDEX')], default='Simples', max_length=10)),
                ('status', models.CharField(choices=[('PENDING_PAYMENT', 'Aguardando Pagamento'), ('CONFIRMED', 'Pago / Aguardando Envio'), ('SHIPPED', 'Enviado')], db_index=True, default='PENDING_PAYMENT', max_length=20)),
                ('vendedor_id', models.CharField(blank=True, db_index=True, max_length=64, null=True)),
                ('valor_total', models.DecimalField(decimal_places=2, max_digits=12)),
                ('custo_total', models.DecimalField(decimal_places=2, max_digits=12)),
                ('lucro_total', models.DecimalField(decimal_places=2, max_digits=12)),
                ('comissao_vendedor', models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ('comprovante', models.TextField(blank=True, null=True, verbose_name='Comprovante PIX')),
                ('codigo_rastreio', models.CharField(blank=True, max_length=100, null=True, verbose_name='Código de Rastreio')),
                ('documento_envio', models.TextField(blank=True, null=True, verbose_name='Etiqueta / Documento de Envio')),
            ],
            options={
                'verbose_name': 'Pedido',
                'verbose_name_plural': 'Pedidos',
                'db_table': 'orders',
                'ordering': ['-data'],
            },
        ),
    ]
