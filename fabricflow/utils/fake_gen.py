import random
from faker import Faker
from faker.providers import BaseProvider


class FabricProvider(BaseProvider):
    """
    面料仓演示数据生成器
    生成款号、颜色、缸号等服装面料专有字段
    """

    # 款式类别
    style_kinds = [
        'POLO', 'TEE', 'HOODIE', 'JOGGER', 'DRESS', 'SHIRT',
        'JACKET', 'LEGGING', 'SHORTS', 'SKIRT'
    ]

    # 面料颜色
    colors = [
        'BLACK', 'WHITE', 'NAVY', 'HEATHER GREY', 'OLIVE', 'MAROON',
        'ROYAL BLUE', 'KHAKI', 'CHARCOAL', 'DUSTY PINK'
    ]

    # 买家品牌后缀
    buyer_suffixes = ['Apparel', 'Outfitters', 'Sportswear', 'Clothing Co.', 'Garments']

    def fabric_style(self):
        """生成款号，如 POLO-2841"""
        return f"{self.random_element(self.style_kinds)}-{self.random_int(1000, 9999)}"

    def fabric_color(self):
        return self.random_element(self.colors)

    def fabric_lot(self):
        """缸号"""
        return f"LOT{self.random_int(100, 999)}"

    def buyer_name(self):
        return f"{self.generator.last_name()} {self.random_element(self.buyer_suffixes)}"

    def roll_measure(self, low, high):
        """卷的码数/重量，按字符串存储，保留一位小数"""
        return f"{random.uniform(low, high):.1f}"


# 初始化 Faker 并添加自定义 Provider
fake = Faker('en_US')
fake.add_provider(FabricProvider)
