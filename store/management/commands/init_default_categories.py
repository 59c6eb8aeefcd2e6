"""
Management command to initialize the default hardware categories and PC types.
Run with: python manage.py init_default_categories
"""
from django.core.management.base import BaseCommand
from store.models import Category, PCType


DEFAULT_CATEGORIES = [
    {
        'slug': 'processors',
        'name': 'Processors',
        'description': 'Desktop CPUs from Intel and AMD',
        'children': ['Intel Processors', 'AMD Processors'],
    },
    {
        'slug': 'graphics-cards',
        'name': 'Graphics Cards',
        'description': 'NVIDIA GeForce and AMD Radeon GPUs',
        'children': ['NVIDIA Graphics Cards', 'AMD Graphics Cards'],
    },
    {
        'slug': 'motherboards',
        'name': 'Motherboards',
        'description': 'Intel and AMD chipset motherboards',
        'children': ['Intel Motherboards', 'AMD Motherboards'],
    },
    {
        'slug': 'memory',
        'name': 'Memory',
        'description': 'Desktop and laptop RAM',
        'children': ['DDR4 RAM', 'DDR5 RAM', 'Laptop RAM'],
    },
    {
        'slug': 'storage',
        'name': 'Storage',
        'description': 'SSDs, hard drives and external storage',
        'children': ['NVMe SSD', 'SATA SSD', 'Hard Drives', 'External Storage'],
    },
    {
        'slug': 'power-supplies',
        'name': 'Power Supplies',
        'description': 'ATX and SFX power supply units',
        'children': [],
    },
    {
        'slug': 'cabinets',
        'name': 'Cabinets',
        'description': 'PC cases for every form factor',
        'children': ['ATX Cabinets', 'Micro ATX Cabinets', 'Mini ITX Cabinets'],
    },
    {
        'slug': 'cooling',
        'name': 'Cooling',
        'description': 'CPU coolers, liquid coolers and case fans',
        'children': ['Air Coolers', 'Liquid Coolers', 'Case Fans'],
    },
    {
        'slug': 'monitors',
        'name': 'Monitors',
        'description': 'Gaming and professional displays',
        'children': ['Gaming Monitors', 'Professional Monitors'],
    },
    {
        'slug': 'peripherals',
        'name': 'Peripherals',
        'description': 'Keyboards, mice, headsets and more',
        'children': ['Keyboards', 'Mice', 'Headsets', 'Webcams'],
    },
    {
        'slug': 'laptops',
        'name': 'Laptops',
        'description': 'Gaming and everyday laptops',
        'children': ['Gaming Laptops', 'Business Laptops'],
    },
    {
        'slug': 'networking',
        'name': 'Networking',
        'description': 'Routers, adapters and switches',
        'children': ['Routers', 'Wi-Fi Adapters', 'Switches'],
    },
]

DEFAULT_PC_TYPES = [
    ('Gaming PC', 'High-performance gaming computers'),
    ('Office PC', 'Computers for office and productivity'),
    ('Workstation', 'Professional workstations for heavy tasks'),
    ('Streaming PC', 'PCs optimized for streaming'),
    ('Budget PC', 'Affordable computers for basic needs'),
    ('Mini PC', 'Compact and portable computers'),
    ('Video Editing PC', 'Optimized for video production'),
    ('3D Rendering PC', 'For 3D modeling and rendering'),
]


class Command(BaseCommand):
    help = 'Initialize default hardware categories and PC types'

    def add_arguments(self, parser):
        parser.add_argument(
            '--skip-pc-types', action='store_true', help='Only seed product categories'
        )

    def handle(self, *args, **options):
        created_count = 0
        existing_count = 0

        for order, category_data in enumerate(DEFAULT_CATEGORIES):
            parent, created = self._ensure_category(
                name=category_data['name'],
                slug=category_data['slug'],
                description=category_data['description'],
                display_order=order,
            )
            if created:
                created_count += 1
            else:
                existing_count += 1

            for child_order, child_name in enumerate(category_data['children']):
                _, created = self._ensure_category(
                    name=child_name,
                    description=f"Shop {child_name} at best prices in India.",
                    parent=parent,
                    display_order=child_order,
                )
                if created:
                    created_count += 1
                else:
                    existing_count += 1

        total = created_count + existing_count
        self.stdout.write(
            self.style.SUCCESS(
                f'\n✓ Categories done! Created: {created_count}, Already existed: {existing_count}, Total: {total}'
            )
        )

        if options['skip_pc_types']:
            return

        pc_types_created = 0
        for order, (name, description) in enumerate(DEFAULT_PC_TYPES):
            _, created = PCType.objects.get_or_create(
                name=name, defaults={'description': description, 'sort_order': order}
            )
            if created:
                pc_types_created += 1
        self.stdout.write(self.style.SUCCESS(f'✓ PC types created: {pc_types_created}'))

    def _ensure_category(self, name, description, slug=None, parent=None, display_order=0):
        existing = Category.objects.filter(name=name, parent=parent).first()
        if existing is None and slug:
            existing = Category.objects.filter(slug=slug).first()
        if existing is not None:
            self.stdout.write(self.style.WARNING(f'✓ Category already exists: {name}'))
            return existing, False

        category = Category.objects.create(
            name=name,
            slug=slug or '',
            description=description,
            parent=parent,
            display_order=display_order,
            is_visible=True,
            seo_title=f"{name} | Sai Computer Bazar",
            seo_description=description,
        )
        self.stdout.write(self.style.SUCCESS(f'✓ Created category: {name}'))
        return category, True
