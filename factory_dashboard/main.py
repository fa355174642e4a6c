from flask import (
    Flask, render_template, request, redirect, url_for, session, flash, Response, jsonify,
    has_request_context,
)
from functools import wraps
import logging
import uuid
import datetime

from factory_dashboard import config

# Sistema de profiling interno
from factory_dashboard.performance_logger import init_profiling

# ═══════════════════════════════════════════════════════════════════════════
# CONTENEDOR DE DEPENDENCIAS - Servicios y Repositorios
# ═══════════════════════════════════════════════════════════════════════════
# Las rutas solo orquestan: formulario → servicio → flash → redirect.
# La lógica de negocio vive en services/, el acceso al backend en repositories/.
# ═══════════════════════════════════════════════════════════════════════════
from factory_dashboard.app_container import get_container
from factory_dashboard.models.entities import OrderType, date_input_value, parse_date
from factory_dashboard.repositories.api_client import ApiError, UnauthorizedError
from factory_dashboard.services.inventory_service import (
    DEFAULT_TAB,
    INVENTORY_TABS,
    original_price,
)
from factory_dashboard.services.dashboard_service import STATS_DEFAULTS
from factory_dashboard.services.validation import PartialUpdateError, ValidationError

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# LOGGING
# ═══════════════════════════════════════════════════════════════════════════

def configure_logging():
    """Configura el logger raíz una sola vez (nivel desde FACTORY_LOG_LEVEL)."""
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(config.LOG_LEVEL)
        return
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    )


configure_logging()

app = Flask(__name__)

# ═══════════════════════════════════════════════════════════════════════════
# INICIALIZAR SISTEMA DE PROFILING
# ═══════════════════════════════════════════════════════════════════════════
# Mide rendimiento de rutas y funciones. Logs en logs/
# Para desactivar: FACTORY_ENABLE_PROFILING=0
init_profiling(app)

# ═══════════════════════════════════════════════════════════════════════════════
# CONFIGURACIÓN DE SESIONES
# ═══════════════════════════════════════════════════════════════════════════════
# SECRET_KEY: En producción DEBE definirse via variable de entorno
# Comando: export FACTORY_SECRET_KEY="tu_clave_secreta_muy_larga_y_aleatoria"
if config.PRODUCTION_MODE and not config.SECRET_KEY:
    logger.warning("PRODUCTION_MODE activo sin FACTORY_SECRET_KEY definida")

app.secret_key = config.SECRET_KEY or config.DEFAULT_SECRET_KEY

app.config.update(
    SESSION_COOKIE_HTTPONLY=True,      # Protege contra XSS
    SESSION_COOKIE_SECURE=False,       # False para HTTP local (True solo para HTTPS)
    SESSION_COOKIE_SAMESITE='Lax',
    PERMANENT_SESSION_LIFETIME=config.SESSION_LIFETIME,
)


# ═══════════════════════════════════════════════════════════════════════════
# TOKEN DEL BACKEND Y SERVICIOS
# ═══════════════════════════════════════════════════════════════════════════

def current_api_token():
    """Token bearer de la sesión; si no hay, el de FACTORY_API_TOKEN."""
    if has_request_context():
        token = session.get('api_token')
        if token:
            return token
    return config.API_TOKEN


def services():
    return get_container(token_provider=current_api_token)


def _flash_api_error(action, error):
    """
    Registra y muestra un error del backend.
    Un 401 se relanza para que lo maneje handle_unauthorized.
    """
    if isinstance(error, UnauthorizedError):
        raise error
    logger.error("%s: %s", action, error)
    flash(f"{action}: {error.message}", "danger")


def _flash_warnings(warnings):
    for warning in warnings:
        flash(warning, "warning")


def _load(loader, default, action):
    """Ejecuta una lectura del backend; si falla, muestra el error y usa default."""
    try:
        return loader()
    except ApiError as e:
        _flash_api_error(action, e)
        return default


def _find(records, record_id):
    if not record_id:
        return None
    return next((r for r in records if r.id == record_id), None)


@app.errorhandler(UnauthorizedError)
def handle_unauthorized(error):
    """401 del backend: se borra el token y se vuelve a /login."""
    session.pop('api_token', None)
    if request.path.startswith('/api/'):
        return jsonify({"ok": False, "error": error.message}), 401
    flash(error.message, "warning")
    return redirect(url_for('login'))


# ═══════════════════════════════════════════════════════════════════════════
# CSRF Y CABECERAS DE SEGURIDAD
# ═══════════════════════════════════════════════════════════════════════════

def generate_csrf_token():
    if 'csrf_token' not in session:
        session['csrf_token'] = uuid.uuid4().hex
    return session['csrf_token']


@app.context_processor
def inject_globals():
    return {
        'csrf_token': generate_csrf_token(),
        'company_name': config.COMPANY_NAME,
        'currency': config.CURRENCY,
        'signed_in': bool(session.get('api_token')),
    }


def verify_csrf(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        if request.method == 'POST':
            token = session.get('csrf_token')
            form_token = (
                request.form.get('csrf_token') or
                request.headers.get('X-CSRF-Token') or
                request.headers.get('X-CSRFToken')
            )
            if not form_token and request.is_json:
                json_data = request.get_json(silent=True) or {}
                form_token = json_data.get('csrf_token')

            if not token or not form_token or token != form_token:
                if request.path.startswith('/api/'):
                    return {"ok": False, "error": "Invalid CSRF token"}, 403
                flash('Your session expired. Please try again.', 'warning')
                return redirect(request.referrer or url_for('dashboard'))
        return f(*args, **kwargs)
    return wrapper


@app.after_request
def set_security_headers(response):
    response.headers['X-Frame-Options'] = 'DENY'
    response.headers['X-Content-Type-Options'] = 'nosniff'
    response.headers['Referrer-Policy'] = 'no-referrer-when-downgrade'
    response.headers['Permissions-Policy'] = 'geolocation=(), microphone=()'
    # HSTS solo con HTTPS real
    if request.is_secure:
        response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
    return response


# ═══════════════════════════════════════════════════════════════════════════
# FILTROS DE PLANTILLA
# ═══════════════════════════════════════════════════════════════════════════

@app.template_filter('money')
def money_filter(value):
    try:
        amount = float(value or 0)
    except (TypeError, ValueError):
        amount = 0.0
    return f"{config.CURRENCY} {amount:,.2f}"


@app.template_filter('datefmt')
def datefmt_filter(value, fmt='%b %d, %Y'):
    parsed = parse_date(value)
    return parsed.strftime(fmt) if parsed else ''


app.jinja_env.filters['dateinput'] = date_input_value
app.jinja_env.globals['original_price'] = original_price


# ═══════════════════════════════════════════════════════════════════════════════
# PROTECCIÓN DE RUTAS SENSIBLES
# ═══════════════════════════════════════════════════════════════════════════════
@app.route('/logs/<path:filename>')
def block_sensitive_routes(filename):
    """Bloquea acceso a la carpeta de logs."""
    return "Not Found", 404


# ═══════════════════════════════════════════════════════════════════════════
# LOGIN / LOGOUT
# ═══════════════════════════════════════════════════════════════════════════

@app.route('/login', methods=['GET', 'POST'])
@verify_csrf
def login():
    if request.method == 'POST':
        token = (request.form.get('token') or '').strip()
        if not token:
            flash("An access token is required.", "warning")
            return redirect(url_for('login'))
        session.permanent = True
        session['api_token'] = token
        flash("Signed in.", "success")
        return redirect(url_for('dashboard'))
    return render_template('login.html')


@app.route('/logout')
def logout():
    session.pop('api_token', None)
    flash("Signed out.", "info")
    return redirect(url_for('login'))


# ═══════════════════════════════════════════════════════════════════════════
# PANEL PRINCIPAL
# ═══════════════════════════════════════════════════════════════════════════

@app.route('/')
def dashboard():
    svc = services().dashboard_service
    stats = _load(svc.stats, None, "Error fetching dashboard stats")
    if stats is None:
        stats = {section: {key: 0 for key in keys} for section, keys in STATS_DEFAULTS.items()}
    return render_template(
        'dashboard.html',
        stats=stats,
        quality_rate=svc.quality_rate(stats),
        modules=svc.module_cards(stats),
        refresh_seconds=config.DASHBOARD_REFRESH_SECONDS,
    )


@app.route('/api/dashboard/stats')
def api_dashboard_stats():
    svc = services().dashboard_service
    try:
        stats = svc.stats()
    except UnauthorizedError:
        raise
    except ApiError as e:
        logger.error("Error fetching dashboard stats: %s", e)
        return jsonify({"ok": False, "error": e.message}), 502
    return jsonify({"ok": True, "stats": stats, "qualityRate": svc.quality_rate(stats)})


# ═══════════════════════════════════════════════════════════════════════════
# INVENTARIO
# ═══════════════════════════════════════════════════════════════════════════

def _inventory_tab(value):
    return value if value in INVENTORY_TABS else DEFAULT_TAB


@app.route('/inventory')
def inventory_page():
    container = services()
    svc = container.inventory_service
    tab = _inventory_tab(request.args.get('tab'))
    search = (request.args.get('q') or '').strip()

    products = _load(svc.list_products, [], "Error fetching products")
    warehouses = _load(container.warehouse_service.list_warehouses, [], "Error fetching warehouses")
    warehouse_names = {w.id: w.name for w in warehouses}

    return render_template(
        'inventory.html',
        tab=tab,
        search=search,
        products=svc.filter_products(products, search, tab),
        all_products=products,
        low_stock=svc.low_stock(products),
        raw_materials=svc.raw_materials(products),
        finished_products=svc.finished_products(products),
        suppliers=svc.suppliers(products),
        distributors=svc.distributors(products),
        warehouses=warehouses,
        warehouse_names=warehouse_names,
        editing=_find(products, request.args.get('edit')),
        discounting=_find(products, request.args.get('discount')),
    )


@app.route('/inventory/products', methods=['POST'])
@verify_csrf
def inventory_add():
    tab = _inventory_tab(request.form.get('tab'))
    try:
        product, warnings = services().inventory_service.add_product(request.form, tab)
        flash(f"Product {product['productId']} added.", "success")
        _flash_warnings(warnings)
    except ValidationError as e:
        flash(str(e), "warning")
    except ApiError as e:
        _flash_api_error("Error saving product", e)
    return redirect(url_for('inventory_page', tab=tab))


@app.route('/inventory/products/<product_key>', methods=['POST'])
@verify_csrf
def inventory_update(product_key):
    tab = _inventory_tab(request.form.get('tab'))
    svc = services().inventory_service
    try:
        existing = svc.get_product(product_key)
        if existing is None:
            flash("Product not found.", "danger")
        else:
            svc.update_product(existing, request.form, tab)
            flash("Product updated.", "success")
    except ValidationError as e:
        flash(str(e), "warning")
        return redirect(url_for('inventory_page', tab=tab, edit=product_key))
    except ApiError as e:
        _flash_api_error("Error saving product", e)
    return redirect(url_for('inventory_page', tab=tab))


@app.route('/inventory/products/<product_key>/delete', methods=['POST'])
@verify_csrf
def inventory_delete(product_key):
    tab = _inventory_tab(request.form.get('tab'))
    try:
        services().inventory_service.delete_product(product_key)
        flash("Product deleted.", "success")
    except ApiError as e:
        _flash_api_error("Error deleting product", e)
    return redirect(url_for('inventory_page', tab=tab))


@app.route('/inventory/products/<product_key>/discount', methods=['POST'])
@verify_csrf
def inventory_discount(product_key):
    tab = _inventory_tab(request.form.get('tab'))
    svc = services().inventory_service
    try:
        product = svc.get_product(product_key)
        if product is None:
            flash("Product not found.", "danger")
        else:
            svc.apply_discount(product, request.form)
            flash("Batch discount applied successfully!", "success")
    except ValidationError as e:
        flash(str(e), "warning")
    except ApiError as e:
        _flash_api_error("Error applying discount", e)
    return redirect(url_for('inventory_page', tab=tab))


@app.route('/inventory/production', methods=['POST'])
@verify_csrf
def inventory_production():
    materials = [
        {'productId': pid, 'quantity': qty}
        for pid, qty in zip(request.form.getlist('materialId'), request.form.getlist('materialQuantity'))
    ]
    try:
        finished, warnings = services().inventory_service.run_production(request.form, materials)
        flash(f"Production recorded: {finished['name']} ({finished['productId']}).", "success")
        _flash_warnings(warnings)
    except ValidationError as e:
        flash(str(e), "warning")
    except ApiError as e:
        _flash_api_error("Error processing production", e)
    return redirect(url_for('inventory_page', tab='production'))


@app.route('/inventory/distribute', methods=['POST'])
@verify_csrf
def inventory_distribute():
    try:
        services().inventory_service.distribute(request.form)
        flash("Dispatch order created successfully!", "success")
    except ValidationError as e:
        flash(str(e), "warning")
    except ApiError as e:
        _flash_api_error("Error creating dispatch", e)
    return redirect(url_for('inventory_page', tab='distribute'))


# ═══════════════════════════════════════════════════════════════════════════
# FINANZAS
# ═══════════════════════════════════════════════════════════════════════════

@app.route('/financial')
def financial_page():
    container = services()
    svc = container.financial_service
    transactions = _load(svc.list_transactions, [], "Error fetching transactions")
    products = _load(container.inventory_service.list_products, [], "Error fetching products")
    payroll = _load(svc.payroll_status, {'isPending': False, 'isProcessed': False}, "Error checking payroll")

    summary = svc.summarize(transactions)
    product_names = {p.product_id: p.name for p in products}

    order_prefill = None
    completing = _find(summary.pending_orders, request.args.get('complete'))
    if completing is not None:
        order_prefill = svc.pending_order_prefill(completing, products)
    elif request.args.get('order'):
        order_prefill = {
            'productId': '', 'quantity': '', 'unitPrice': '', 'purchaseOrder': '',
            'orderType': request.args.get('order'), 'supplier': '', 'pendingId': '',
        }

    return render_template(
        'financial.html',
        transactions=transactions,
        summary=summary,
        products=products,
        product_names=product_names,
        payroll=payroll,
        editing=_find(transactions, request.args.get('edit')),
        order_prefill=order_prefill,
        order_types=[t.value for t in OrderType],
        paying=_find(summary.dispatch_orders, request.args.get('pay')),
        ledger_filters=svc.ledger_filters({}),
        today=datetime.date.today().isoformat(),
    )


@app.route('/financial/transactions', methods=['POST'])
@verify_csrf
def financial_create():
    try:
        services().financial_service.save_transaction(request.form)
        flash("Transaction saved.", "success")
    except ValidationError as e:
        flash(str(e), "warning")
    except ApiError as e:
        _flash_api_error("Error saving transaction", e)
    return redirect(url_for('financial_page'))


@app.route('/financial/transactions/<transaction_key>', methods=['POST'])
@verify_csrf
def financial_update(transaction_key):
    svc = services().financial_service
    try:
        existing = _find(svc.list_transactions(), transaction_key)
        if existing is None:
            flash("Transaction not found.", "danger")
        else:
            svc.save_transaction(request.form, existing)
            flash("Transaction updated.", "success")
    except ValidationError as e:
        flash(str(e), "warning")
    except ApiError as e:
        _flash_api_error("Error saving transaction", e)
    return redirect(url_for('financial_page'))


@app.route('/financial/transactions/<transaction_key>/delete', methods=['POST'])
@verify_csrf
def financial_delete(transaction_key):
    try:
        services().financial_service.delete_transaction(transaction_key)
        flash("Transaction deleted.", "success")
    except ApiError as e:
        _flash_api_error("Error deleting transaction", e)
    return redirect(url_for('financial_page'))


@app.route('/financial/orders', methods=['POST'])
@verify_csrf
def financial_order():
    svc = services().financial_service
    order_type = request.form.get('orderType', OrderType.PURCHASE.value)
    try:
        if order_type == OrderType.DISPATCH.value:
            invoice = svc.create_dispatch(request.form)
            flash(f"Dispatch order created successfully! Invoice: {invoice}", "success")
        else:
            svc.complete_order(request.form, pending_id=request.form.get('pendingId') or None)
            flash("Order completed.", "success")
    except ValidationError as e:
        flash(str(e), "warning")
    except PartialUpdateError as e:
        flash(f"{e} Completed steps: {', '.join(e.completed)}.", "danger")
    except ApiError as e:
        _flash_api_error("Error saving order", e)
    return redirect(url_for('financial_page'))


@app.route('/financial/payments', methods=['POST'])
@verify_csrf
def financial_payment():
    try:
        invoice = services().financial_service.process_payment(request.form)
        flash(f"Payment processed successfully! Invoice: {invoice}", "success")
    except ValidationError as e:
        flash(str(e), "warning")
    except ApiError as e:
        _flash_api_error("Error processing payment", e)
    return redirect(url_for('financial_page'))


@app.route('/financial/payroll', methods=['POST'])
@verify_csrf
def financial_payroll():
    try:
        services().financial_service.process_payroll()
        flash("Payroll processed successfully!", "success")
    except ApiError as e:
        _flash_api_error("Error processing payroll", e)
    return redirect(url_for('financial_page'))


@app.route('/financial/ledger')
def financial_ledger():
    svc = services().financial_service
    filters = svc.ledger_filters(request.args)
    entries = _load(lambda: svc.ledger(filters), [], "Error generating ledger")
    return render_template('ledger.html', filters=filters, entries=entries)


@app.route('/financial/ledger/export')
def financial_ledger_export():
    svc = services().financial_service
    filters = svc.ledger_filters(request.args)
    try:
        entries = svc.ledger(filters)
    except ApiError as e:
        _flash_api_error("Error generating ledger", e)
        return redirect(url_for('financial_ledger', **filters))
    filename = f"ledger_{filters['period']}_{filters['date']}.csv"
    return Response(
        svc.ledger_csv(entries),
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment;filename={filename}'},
    )


@app.route('/financial/daily-report')
def financial_daily_report():
    svc = services().financial_service
    try:
        report = svc.daily_report()
    except ApiError as e:
        _flash_api_error("Error generating daily report", e)
        return redirect(url_for('financial_page'))
    return render_template('daily_report.html', report=report)


# ═══════════════════════════════════════════════════════════════════════════
# RECURSOS HUMANOS
# ═══════════════════════════════════════════════════════════════════════════

@app.route('/hr')
def hr_page():
    svc = services().hr_service
    employees = _load(svc.list_employees, [], "Error fetching employees")
    attendance = _load(svc.list_attendance, [], "Error fetching attendance")
    today_records = svc.today_attendance(attendance)
    return render_template(
        'hr.html',
        employees=employees,
        attendance=attendance,
        today_attendance=today_records,
        present_today=svc.present_count(today_records),
        total_salary=svc.total_salary(employees),
        employee_names=svc.employee_names(employees),
        editing=_find(employees, request.args.get('edit')),
        today=datetime.date.today().isoformat(),
    )


@app.route('/hr/employees', methods=['POST'])
@verify_csrf
def hr_employee_create():
    try:
        services().hr_service.save_employee(request.form)
        flash("Employee saved.", "success")
    except ValidationError as e:
        flash(str(e), "warning")
    except ApiError as e:
        _flash_api_error("Error saving employee", e)
    return redirect(url_for('hr_page'))


@app.route('/hr/employees/<employee_key>', methods=['POST'])
@verify_csrf
def hr_employee_update(employee_key):
    svc = services().hr_service
    try:
        existing = _find(svc.list_employees(), employee_key)
        if existing is None:
            flash("Employee not found.", "danger")
        else:
            svc.save_employee(request.form, existing)
            flash("Employee updated.", "success")
    except ValidationError as e:
        flash(str(e), "warning")
    except ApiError as e:
        _flash_api_error("Error saving employee", e)
    return redirect(url_for('hr_page'))


@app.route('/hr/employees/<employee_key>/delete', methods=['POST'])
@verify_csrf
def hr_employee_delete(employee_key):
    try:
        services().hr_service.delete_employee(employee_key)
        flash("Employee deleted.", "success")
    except ApiError as e:
        _flash_api_error("Error deleting employee", e)
    return redirect(url_for('hr_page'))


@app.route('/hr/attendance', methods=['POST'])
@verify_csrf
def hr_attendance():
    try:
        services().hr_service.mark_attendance(request.form)
        flash("Attendance marked.", "success")
    except ValidationError as e:
        flash(str(e), "warning")
    except ApiError as e:
        _flash_api_error("Error marking attendance", e)
    return redirect(url_for('hr_page'))


# ═══════════════════════════════════════════════════════════════════════════
# CALIDAD
# ═══════════════════════════════════════════════════════════════════════════

@app.route('/quality')
def quality_page():
    container = services()
    svc = container.quality_service
    records = _load(svc.list_records, [], "Error fetching quality records")
    products = _load(container.inventory_service.list_products, [], "Error fetching products")
    return render_template(
        'quality.html',
        records=records,
        products=products,
        summary=svc.summarize(records),
        editing=_find(records, request.args.get('edit')),
        today=datetime.date.today().isoformat(),
    )


@app.route('/quality/records', methods=['POST'])
@verify_csrf
def quality_create():
    try:
        _, warnings = services().quality_service.save_record(request.form)
        flash("Quality record saved.", "success")
        _flash_warnings(warnings)
    except ValidationError as e:
        flash(str(e), "warning")
    except ApiError as e:
        _flash_api_error("Error saving quality record", e)
    return redirect(url_for('quality_page'))


@app.route('/quality/records/<record_key>', methods=['POST'])
@verify_csrf
def quality_update(record_key):
    svc = services().quality_service
    try:
        existing = _find(svc.list_records(), record_key)
        if existing is None:
            flash("Quality record not found.", "danger")
        else:
            _, warnings = svc.save_record(request.form, existing)
            flash("Quality record updated.", "success")
            _flash_warnings(warnings)
    except ValidationError as e:
        flash(str(e), "warning")
    except ApiError as e:
        _flash_api_error("Error saving quality record", e)
    return redirect(url_for('quality_page'))


@app.route('/quality/records/<record_key>/delete', methods=['POST'])
@verify_csrf
def quality_delete(record_key):
    try:
        services().quality_service.delete_record(record_key)
        flash("Quality record deleted.", "success")
    except ApiError as e:
        _flash_api_error("Error deleting quality record", e)
    return redirect(url_for('quality_page'))


# ═══════════════════════════════════════════════════════════════════════════
# ALMACENES ("Sale" en la navegación)
# ═══════════════════════════════════════════════════════════════════════════

@app.route('/warehouse')
def warehouse_page():
    container = services()
    svc = container.warehouse_service
    warehouses = _load(svc.list_warehouses, [], "Error fetching warehouses")
    products = _load(container.inventory_service.list_products, [], "Error fetching products")
    records = _load(container.quality_service.list_records, [], "Error fetching quality records")
    rows = [
        {
            'warehouse': w,
            'products': svc.products_in(w, products),
            'defective': svc.defective_count_for(w, products, records),
        }
        for w in warehouses
    ]
    return render_template(
        'warehouse.html',
        rows=rows,
        summary=svc.summarize(warehouses),
        editing=_find(warehouses, request.args.get('edit')),
    )


@app.route('/warehouse/warehouses', methods=['POST'])
@verify_csrf
def warehouse_create():
    try:
        services().warehouse_service.save_warehouse(request.form)
        flash("Warehouse saved.", "success")
    except ValidationError as e:
        flash(str(e), "warning")
    except ApiError as e:
        _flash_api_error("Error saving warehouse", e)
    return redirect(url_for('warehouse_page'))


@app.route('/warehouse/warehouses/<warehouse_key>', methods=['POST'])
@verify_csrf
def warehouse_update(warehouse_key):
    svc = services().warehouse_service
    try:
        existing = _find(svc.list_warehouses(), warehouse_key)
        if existing is None:
            flash("Warehouse not found.", "danger")
        else:
            svc.save_warehouse(request.form, existing)
            flash("Warehouse updated.", "success")
    except ValidationError as e:
        flash(str(e), "warning")
    except ApiError as e:
        _flash_api_error("Error saving warehouse", e)
    return redirect(url_for('warehouse_page'))


@app.route('/warehouse/warehouses/<warehouse_key>/delete', methods=['POST'])
@verify_csrf
def warehouse_delete(warehouse_key):
    try:
        services().warehouse_service.delete_warehouse(warehouse_key)
        flash("Warehouse deleted.", "success")
    except ApiError as e:
        _flash_api_error("Error deleting warehouse", e)
    return redirect(url_for('warehouse_page'))


# ═══════════════════════════════════════════════════════════════════════════
# MANTENIMIENTO
# ═══════════════════════════════════════════════════════════════════════════

@app.route('/maintenance')
def maintenance_page():
    svc = services().maintenance_service
    items = _load(svc.list_items, [], "Error fetching maintenance items")
    now = datetime.datetime.now()
    return render_template(
        'maintenance.html',
        items=items,
        board=svc.classify(items, now),
        overdue_ids={i.id for i in items if svc.is_overdue(i, now)},
        due_soon_ids={i.id for i in items if svc.is_due_soon(i, now)},
        editing=_find(items, request.args.get('edit')),
    )


@app.route('/maintenance/items', methods=['POST'])
@verify_csrf
def maintenance_create():
    try:
        services().maintenance_service.save_item(request.form)
        flash("Maintenance item saved.", "success")
    except ValidationError as e:
        flash(str(e), "warning")
    except ApiError as e:
        _flash_api_error("Error saving maintenance item", e)
    return redirect(url_for('maintenance_page'))


@app.route('/maintenance/items/<item_key>', methods=['POST'])
@verify_csrf
def maintenance_update(item_key):
    svc = services().maintenance_service
    try:
        existing = _find(svc.list_items(), item_key)
        if existing is None:
            flash("Maintenance item not found.", "danger")
        else:
            svc.save_item(request.form, existing)
            flash("Maintenance item updated.", "success")
    except ValidationError as e:
        flash(str(e), "warning")
    except ApiError as e:
        _flash_api_error("Error saving maintenance item", e)
    return redirect(url_for('maintenance_page'))


@app.route('/maintenance/items/<item_key>/delete', methods=['POST'])
@verify_csrf
def maintenance_delete(item_key):
    try:
        services().maintenance_service.delete_item(item_key)
        flash("Maintenance item deleted.", "success")
    except ApiError as e:
        _flash_api_error("Error deleting maintenance item", e)
    return redirect(url_for('maintenance_page'))


# ═══════════════════════════════════════════════════════════════════════════
# MODO MANTENIMIENTO
# ═══════════════════════════════════════════════════════════════════════════

@app.route('/maintenance-mode')
def maintenance_mode_page():
    svc = services().maintenance_mode_service
    status = _load(svc.status, {'isActive': False, 'data': None}, "Error fetching maintenance status")
    history = _load(svc.history, [], "Error fetching maintenance history")
    return render_template('maintenance_mode.html', status=status, history=history)


@app.route('/maintenance-mode/activate', methods=['POST'])
@verify_csrf
def maintenance_mode_activate():
    try:
        result = services().maintenance_mode_service.activate(request.form)
        flash(
            "Maintenance mode activated successfully! "
            f"Email notification: {result.get('emailNotification', 'unknown')}. "
            f"Reminder scheduled: {'Yes' if result.get('reminderScheduled') else 'No'}.",
            "success",
        )
    except ValidationError as e:
        flash(str(e), "warning")
    except ApiError as e:
        _flash_api_error("Error activating maintenance mode", e)
    return redirect(url_for('maintenance_mode_page'))


@app.route('/maintenance-mode/deactivate', methods=['POST'])
@verify_csrf
def maintenance_mode_deactivate():
    try:
        result = services().maintenance_mode_service.deactivate()
        flash(
            "Maintenance mode deactivated successfully! "
            f"Email notification: {result.get('emailNotification', 'unknown')}.",
            "success",
        )
    except ApiError as e:
        _flash_api_error("Error deactivating maintenance mode", e)
    return redirect(url_for('maintenance_mode_page'))


@app.route('/maintenance-mode/test-email', methods=['POST'])
@verify_csrf
def maintenance_mode_test_email():
    result = services().maintenance_mode_service.test_email()
    if result['success']:
        flash("Email configuration is working. A test email was sent.", "success")
    else:
        flash(f"Email configuration error: {result.get('error') or 'unknown error'}", "danger")
    return redirect(url_for('maintenance_mode_page'))


if __name__ == "__main__":
    # Desarrollo local. En producción usar gunicorn (ver wsgi.py)
    DEBUG = not config.PRODUCTION_MODE
    logger.info("Servidor iniciado en http://%s:%s", config.HOST, config.PORT)
    app.run(host=config.HOST, port=config.PORT, debug=DEBUG)
